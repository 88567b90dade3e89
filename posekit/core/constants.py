"""
Global constants for PoseKit

Includes:
- COCO keypoint definitions
- Left/right mirror partner table
- Similarity and variation tunables
- OpenPose interchange defaults
- Image processing defaults
- Color palettes
"""

# ===== COCO Keypoints (17 points) =====
COCO_KEYPOINT_NAMES = [
    'nose',             # 0
    'left_eye',         # 1
    'right_eye',        # 2
    'left_ear',         # 3
    'right_ear',        # 4
    'left_shoulder',    # 5
    'right_shoulder',   # 6
    'left_elbow',       # 7
    'right_elbow',      # 8
    'left_wrist',       # 9
    'right_wrist',      # 10
    'left_hip',         # 11
    'right_hip',        # 12
    'left_knee',        # 13
    'right_knee',       # 14
    'left_ankle',       # 15
    'right_ankle',      # 16
]

COCO_NUM_KEYPOINTS = len(COCO_KEYPOINT_NAMES)

# Name -> index lookup
COCO_KEYPOINT_INDEX = {name: i for i, name in enumerate(COCO_KEYPOINT_NAMES)}

# COCO Skeleton - connections between keypoints for rendering
COCO_SKELETON_CONNECTIONS = [
    # Head
    (0, 1), (0, 2), (1, 3), (2, 4),
    # Arms
    (5, 6), (5, 7), (7, 9), (6, 8), (8, 10),
    # Torso
    (5, 11), (6, 12), (11, 12),
    # Legs
    (11, 13), (13, 15), (12, 14), (14, 16),
]

# ===== Mirror Mapping =====
# Left <-> right partner for every paired landmark. Indices not listed
# (the nose, or anything past the COCO layout) are their own partner.
MIRROR_PAIRS = [
    (1, 2),     # eyes
    (3, 4),     # ears
    (5, 6),     # shoulders
    (7, 8),     # elbows
    (9, 10),    # wrists
    (11, 12),   # hips
    (13, 14),   # knees
    (15, 16),   # ankles
]

MIRROR_MAPPING = {}
for _left, _right in MIRROR_PAIRS:
    MIRROR_MAPPING[_left] = _right
    MIRROR_MAPPING[_right] = _left
del _left, _right

# ===== Similarity =====
# Keypoints at or below this confidence are ignored when comparing poses
SIMILARITY_CONFIDENCE_THRESHOLD = 0.5

# Multiplier applied to the mean normalized distance. Tuned by hand, not
# derived from data.
SIMILARITY_SENSITIVITY = 5.0

DEFAULT_SIMILARITY_THRESHOLD = 0.7
DEFAULT_MAX_SIMILAR_RESULTS = 5

# ===== Variations =====
VARIATION_SCALE_SMALL = 0.8
VARIATION_SCALE_LARGE = 1.2
VARIATION_ROTATION_DEGREES = 15

DEFAULT_MAX_VARIANTS = 8

# Adjustable transforms offered for custom variants
TRANSFORMATION_OPTIONS = [
    {'id': 'mirror', 'label': 'Mirror Horizontally', 'type': 'boolean'},
    {'id': 'scale', 'label': 'Scale', 'type': 'scale',
     'min': 0.5, 'max': 2.0, 'step': 0.1},
    {'id': 'rotation', 'label': 'Rotate', 'type': 'number',
     'min': -180, 'max': 180, 'step': 15, 'unit': '°'},
]

# ===== OpenPose Interchange =====
OPENPOSE_FORMAT_VERSION = 1.3
OPENPOSE_VALUES_PER_KEYPOINT = 3
OPENPOSE_MIN_POSE_VALUES = COCO_NUM_KEYPOINTS * OPENPOSE_VALUES_PER_KEYPOINT  # 51

# OpenPose JSON does not carry image dimensions
DEFAULT_FRAME_WIDTH = 768
DEFAULT_FRAME_HEIGHT = 768

OPENPOSE_EMPTY_FIELDS = [
    'face_keypoints_2d',
    'hand_left_keypoints_2d',
    'hand_right_keypoints_2d',
    'pose_keypoints_3d',
    'face_keypoints_3d',
    'hand_left_keypoints_3d',
    'hand_right_keypoints_3d',
]

# ===== Image Processing =====
IMAGE_FORMATS = {
    'webp': {'extension': 'webp', 'pil_format': 'WEBP'},
    'jpeg': {'extension': 'jpg', 'pil_format': 'JPEG'},
    'png': {'extension': 'png', 'pil_format': 'PNG'},
}

DEFAULT_IMAGE_SIZE = (768, 768)
DEFAULT_IMAGE_QUALITY = 90
DEFAULT_IMAGE_FORMAT = 'webp'
DEFAULT_THUMBNAIL_SIZE = 150
RESPONSIVE_IMAGE_SIZES = (256, 512, 768, 1024)
EXIF_ORIENTATION_TAG = 0x0112

VALID_IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.webp'}

# ===== Catalog Export =====
EXPORT_FORMAT_VERSION = '1.0'

CSV_EXPORT_COLUMNS = ['ID', 'Title', 'Slug', 'Theme', 'Preview URL']

# ===== Catalog Search =====
# Field weights for ranking fuzzy matches
SEARCH_FIELD_WEIGHTS = {
    'title': 0.4,
    'theme': 0.3,
    'category': 0.2,
    'tags': 0.3,
    'description': 0.1,
}

SEARCH_THRESHOLD = 0.3              # 0 = exact only, 1 = match anything
SEARCH_MIN_MATCH_CHAR_LENGTH = 2
SEARCH_RESULT_LIMIT = 100
SEARCH_SUGGESTION_LIMIT = 8
SAFETY_LEVELS = ('safe', 'moderate', 'adult')

# ===== Color Palettes =====
# BGR format for OpenCV

VARIANT_COLORS = [
    (0, 0, 255),         # Red
    (255, 0, 0),         # Blue
    (0, 255, 0),         # Green
    (255, 255, 0),       # Cyan
    (255, 0, 255),       # Magenta
    (0, 255, 255),       # Yellow
    (0, 128, 255),       # Orange
    (128, 0, 255),       # Violet
]
