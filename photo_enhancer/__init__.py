"""Image enhancement package for photo-enhancer.

This package contains:
- buffer: the RGBA8 PixelBuffer and dimension types
- processing: planner, resampler, sharpening, tone adjustment and the enhance pipeline
- io_utils: filesystem and image I/O helpers
- metrics: helpers to persist params and run metrics with history
- errors: typed errors raised by the package
"""

from .errors import (
    EnhanceError,
    InvalidDimensionsError,
    DegenerateOutputError,
    DecodeError,
    EncodeError,
)

from .buffer import (
    PixelBuffer,
    Dimensions,
    BoundingBox,
    UHD_4K,
)

from .io_utils import (
    ensure_dir,
    is_image_file,
    make_output_path,
    load_image_rgba,
    save_image,
)

from .processing import (
    SHARPEN_KERNEL,
    RESAMPLE_METHODS,
    BorderPolicy,
    ToneParameters,
    plan_dimensions,
    resample,
    sharpen,
    apply_contrast,
    apply_brightness,
    adjust_tone,
    enhance,
    process_one_image,
)

from .metrics import (
    save_params_json,
    append_run_metrics,
)

__all__ = [
    # errors
    "EnhanceError",
    "InvalidDimensionsError",
    "DegenerateOutputError",
    "DecodeError",
    "EncodeError",
    # buffer
    "PixelBuffer",
    "Dimensions",
    "BoundingBox",
    "UHD_4K",
    # io_utils
    "ensure_dir",
    "is_image_file",
    "make_output_path",
    "load_image_rgba",
    "save_image",
    # processing
    "SHARPEN_KERNEL",
    "RESAMPLE_METHODS",
    "BorderPolicy",
    "ToneParameters",
    "plan_dimensions",
    "resample",
    "sharpen",
    "apply_contrast",
    "apply_brightness",
    "adjust_tone",
    "enhance",
    "process_one_image",
    # metrics
    "save_params_json",
    "append_run_metrics",
]
