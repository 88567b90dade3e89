"""
Tests module - Unit and integration tests for PoseKit package

Provides:
- Core module tests (config, constants, exceptions)
- Pose module tests (transforms, similarity, variations, validation)
- IO module tests (OpenPose interchange, loading, export, images)
- Visualization and CLI tests
"""

__all__ = []
