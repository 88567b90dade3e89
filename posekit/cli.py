#!/usr/bin/env python3
"""
PoseKit command line interface

Sub-commands:
    variants   Generate the standard variation set for a pose
    transform  Mirror / scale / rotate a pose
    similar    Rank candidate poses by similarity to a target
    convert    Convert between PoseKit JSON and OpenPose JSON
    render     Draw a pose (or its variation sheet) to an image
    export     Export a pose catalog as JSON, CSV or ZIP
    images     Resize and re-encode reference images
    search     Search a pose catalog by text and filters
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .catalog.search import CatalogItem, CatalogSearch, SearchFilters
from .core.config import PoseKitConfig
from .core.constants import SAFETY_LEVELS
from .core.exceptions import PoseKitException, DataLoadError, handle_posekit_exception
from .io.data_loader import PoseLoader
from .io.export import (
    PoseExportRecord,
    export_pose_archive,
    export_poses_to_csv,
    export_poses_to_json,
)
from .io.image_processor import ImageProcessor
from .io.openpose import save_openpose_json
from .pose.keypoint_utils import keypoints_in_bounds
from .pose.models import PoseCandidate
from .pose.similarity import find_similar_poses
from .pose.transforms import TransformSpec, transform_pose
from .pose.variations import VariantCollection, generate_pose_variations

logger = logging.getLogger("posekit")


def _write_json(data, output: Optional[str]) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
        logger.info(f"Wrote {path}")
    else:
        print(text)


def cmd_variants(args, config: PoseKitConfig) -> int:
    pose = PoseLoader.load(args.pose, config.interchange.default_width, config.interchange.default_height)
    variants = VariantCollection.from_config(config.variants, pose)
    _write_json([v.to_dict() for v in variants], args.output)
    return 0


def cmd_transform(args, config: PoseKitConfig) -> int:
    pose = PoseLoader.load(args.pose, config.interchange.default_width, config.interchange.default_height)
    spec = TransformSpec(
        mirror=args.mirror,
        scale=tuple(args.scale) if args.scale else None,
        rotation=args.rotate,
    )
    logger.debug(f"Transform: {spec.describe() or 'none'}")
    _write_json(transform_pose(pose, spec).to_dict(), args.output)
    return 0


def cmd_similar(args, config: PoseKitConfig) -> int:
    width, height = config.interchange.default_width, config.interchange.default_height
    target = PoseLoader.load(args.target, width, height)
    candidates = PoseCandidate.from_pairs(
        PoseLoader.load_batch(args.candidates, show_progress=not args.quiet, width=width, height=height)
    )

    similarity = config.similarity
    if args.threshold is not None:
        similarity.threshold = args.threshold
    if args.max_results is not None:
        similarity.max_results = args.max_results
    similarity.__post_init__()

    hits = find_similar_poses(target, candidates, config=similarity)
    _write_json(
        [{'id': hit.candidate.id, 'similarity': round(hit.similarity, 6)} for hit in hits],
        args.output,
    )
    return 0


def cmd_convert(args, config: PoseKitConfig) -> int:
    width = args.width or config.interchange.default_width
    height = args.height or config.interchange.default_height
    pose = PoseLoader.load(args.input, width, height)

    if args.to == 'openpose':
        save_openpose_json(pose, args.output)
    else:
        PoseLoader.save(pose, args.output)
    logger.info(f"Converted {args.input} -> {args.output} ({args.to})")
    return 0


def cmd_render(args, config: PoseKitConfig) -> int:
    import cv2
    from .visualization.drawer import draw_variation_sheet, render_pose

    pose = PoseLoader.load(args.pose, config.interchange.default_width, config.interchange.default_height)
    if not keypoints_in_bounds(pose):
        logger.warning("Some keypoints fall outside the frame and will be clipped")
    if args.variations:
        image = draw_variation_sheet(generate_pose_variations(pose), tile_size=args.tile_size)
    else:
        image = render_pose(pose)

    Path(args.output).parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(args.output), image):
        raise DataLoadError(f"Failed to write image: {args.output}")
    logger.info(f"Rendered {args.output}")
    return 0


def _read_catalog(path: str, factory):
    data = PoseLoader.read_json(path)
    if isinstance(data, dict):
        data = data.get('poses', [])
    if not isinstance(data, list):
        raise DataLoadError(f"Catalog must be a list of poses: {path}")

    try:
        return [factory(d) for d in data]
    except (KeyError, TypeError, AttributeError) as e:
        raise DataLoadError(f"Malformed catalog entry in {path}: {e}")


def cmd_export(args, config: PoseKitConfig) -> int:
    records = _read_catalog(args.catalog, PoseExportRecord.from_dict)

    if args.format == 'json':
        export_poses_to_json(records, args.output)
    elif args.format == 'csv':
        export_poses_to_csv(records, args.output)
    else:
        export_pose_archive(records, args.output, include_variations=args.variations)
    logger.info(f"Exported {len(records)} poses to {args.output}")
    return 0


def cmd_images(args, config: PoseKitConfig) -> int:
    if args.upload_dir:
        config.paths.upload_dir = args.upload_dir
    if args.format:
        config.image.format = args.format
    if args.thumbnail:
        config.image.generate_thumbnail = True
    config.image.__post_init__()

    processor = ImageProcessor.from_config(config)
    results = processor.process_batch(args.images, show_progress=not args.quiet)
    _write_json([r.to_dict() for r in results], args.output)
    return 0 if len(results) == len(args.images) else 1



def cmd_search(args, config: PoseKitConfig) -> int:
    catalog = CatalogSearch.from_config(_read_catalog(args.catalog, CatalogItem.from_dict), config.search)

    if args.suggest:
        _write_json(catalog.suggestions(args.query), args.output)
        return 0
    if args.list_filters:
        _write_json(catalog.available_filters(), args.output)
        return 0

    filters = SearchFilters(
        themes=args.theme or [],
        categories=args.category or [],
        safety_levels=args.safety or [],
        tags=args.tag or [],
    )
    results = catalog.search(args.query, filters)
    logger.info(f"{len(results)} of {len(catalog.items)} catalog entries match")
    _write_json([r.to_dict() for r in results], args.output)
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='posekit',
        description='Pose reference toolkit: transforms, variations, similarity, interchange',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  posekit variants pose.json -o variations.json
  posekit transform pose.json --mirror --rotate 15 -o out.json
  posekit similar target.json catalog/*.json --threshold 0.8
  posekit convert pose.json --to openpose -o pose_openpose.json
  posekit render pose.json --variations -o sheet.png
  posekit search catalog.json "bride window" --theme wedding
        '''
    )
    parser.add_argument('--config', help='Path to YAML configuration file')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose logging')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('variants', help='Generate the standard variation set')
    p.add_argument('pose', help='Pose JSON (PoseKit or OpenPose)')
    p.add_argument('-o', '--output', help='Output JSON (default: stdout)')
    p.set_defaults(func=cmd_variants)

    p = sub.add_parser('transform', help='Mirror, scale and rotate a pose')
    p.add_argument('pose', help='Pose JSON (PoseKit or OpenPose)')
    p.add_argument('--mirror', action='store_true', help='Mirror horizontally')
    p.add_argument('--scale', nargs=2, type=float, metavar=('W', 'H'), help='Target frame size')
    p.add_argument('--rotate', type=float, metavar='DEG', help='Rotation in degrees')
    p.add_argument('-o', '--output', help='Output JSON (default: stdout)')
    p.set_defaults(func=cmd_transform)

    p = sub.add_parser('similar', help='Find similar poses')
    p.add_argument('target', help='Target pose JSON')
    p.add_argument('candidates', nargs='+', help='Candidate pose JSON files')
    p.add_argument('--threshold', type=float, help='Minimum similarity (default from config)')
    p.add_argument('--max-results', type=int, help='Result cap (default from config)')
    p.add_argument('--quiet', action='store_true', help='Hide progress bar')
    p.add_argument('-o', '--output', help='Output JSON (default: stdout)')
    p.set_defaults(func=cmd_similar)

    p = sub.add_parser('convert', help='Convert between PoseKit and OpenPose JSON')
    p.add_argument('input', help='Input pose JSON')
    p.add_argument('-o', '--output', required=True, help='Output JSON')
    p.add_argument('--to', choices=['openpose', 'posekit'], required=True, help='Target format')
    p.add_argument('--width', type=float, help='Frame width for OpenPose input')
    p.add_argument('--height', type=float, help='Frame height for OpenPose input')
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser('render', help='Render a pose skeleton to an image')
    p.add_argument('pose', help='Pose JSON')
    p.add_argument('-o', '--output', required=True, help='Output image (.png, .jpg)')
    p.add_argument('--variations', action='store_true', help='Render the variation sheet')
    p.add_argument('--tile-size', type=int, default=256, help='Variation tile size')
    p.set_defaults(func=cmd_render)

    p = sub.add_parser('export', help='Export a pose catalog')
    p.add_argument('catalog', help='Catalog JSON (list of poses, or {"poses": [...]})')
    p.add_argument('-o', '--output', required=True, help='Output file')
    p.add_argument('--format', choices=['json', 'csv', 'zip'], default='json')
    p.add_argument('--variations', action='store_true', help='Include variations in ZIP')
    p.set_defaults(func=cmd_export)

    p = sub.add_parser('images', help='Process reference images')
    p.add_argument('images', nargs='+', help='Image files')
    p.add_argument('--upload-dir', help='Destination directory (default from config)')
    p.add_argument('--format', choices=['webp', 'jpeg', 'png'], help='Output format')
    p.add_argument('--thumbnail', action='store_true', help='Also write thumbnails')
    p.add_argument('--quiet', action='store_true', help='Hide progress bar')
    p.add_argument('-o', '--output', help='Result JSON (default: stdout)')
    p.set_defaults(func=cmd_images)

    p = sub.add_parser('search', help='Search a pose catalog')
    p.add_argument('catalog', help='Catalog JSON (list of poses, or {"poses": [...]})')
    p.add_argument('query', nargs='?', default='', help='Search text (default: everything)')
    p.add_argument('--theme', action='append', help='Only this theme (repeatable)')
    p.add_argument('--category', action='append', help='Only this category (repeatable)')
    p.add_argument('--safety', action='append', choices=SAFETY_LEVELS, help='Only this safety level (repeatable)')
    p.add_argument('--tag', action='append', help='Tag substring (repeatable)')
    p.add_argument('--suggest', action='store_true', help='Print suggestions for the query instead')
    p.add_argument('--list-filters', action='store_true', help='Print available filter values instead')
    p.add_argument('-o', '--output', help='Output JSON (default: stdout)')
    p.set_defaults(func=cmd_search)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = PoseKitConfig.from_yaml(args.config) if args.config else PoseKitConfig()
        config = PoseKitConfig.from_env(config)
        if args.verbose:
            config.logging.level = 'DEBUG'
        config.logging.apply()
        logging.getLogger().setLevel(config.logging.level)

        return args.func(args, config)
    except PoseKitException as e:
        logger.error(f"Fatal error: {handle_posekit_exception(e, verbose=False)}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
