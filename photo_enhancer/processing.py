from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

import numpy as np
import cv2
from scipy.interpolate import RectBivariateSpline

from .buffer import UHD_4K, Dimensions, PixelBuffer, check_positive
from .errors import DegenerateOutputError
from .io_utils import load_image_rgba


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

SHARPEN_KERNEL = np.array([[0, -1, 0], [-1, 5, -1], [0, -1, 0]], dtype=np.float32)

_CV2_UPSCALE = {
    "auto": cv2.INTER_LANCZOS4,
    "lanczos": cv2.INTER_LANCZOS4,
    "cubic": cv2.INTER_CUBIC,
}
RESAMPLE_METHODS = tuple(_CV2_UPSCALE) + ("bspline",)


class BorderPolicy(str, Enum):
    """What the sharpening pass writes into the one-pixel frame."""

    COPY = "copy"
    ZERO = "zero"


@dataclass(frozen=True)
class ToneParameters:
    contrast: float = 1.10
    brightness: float = 1.05

    def __post_init__(self) -> None:
        for name in ("contrast", "brightness"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} doit être un réel positif ou nul, reçu: {value!r}")


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# ---------------------------------------------
# Dimensions cibles
# ---------------------------------------------

def plan_dimensions(
    source_w: int,
    source_h: int,
    box_w: int,
    box_h: int,
    clamp: bool = False,
) -> Dimensions:
    """
    Ajuste la source dans la boîte en conservant son ratio.
    L'axe dominant prend exactement la taille de la boîte, l'autre est arrondi.
    Avec ``clamp=True`` un axe arrondi à 0 est ramené à 1 au lieu de lever
    DegenerateOutputError.
    """
    check_positive(source_w=source_w, source_h=source_h, box_w=box_w, box_h=box_h)
    source_aspect = source_w / source_h
    box_aspect = box_w / box_h

    if source_aspect > box_aspect:
        target_w, target_h = box_w, round_half_up(box_w / source_aspect)
    else:
        target_w, target_h = round_half_up(box_h * source_aspect), box_h

    if target_w < 1 or target_h < 1:
        if not clamp:
            raise DegenerateOutputError(
                f"Sortie dégénérée {target_w}x{target_h} pour une source {source_w}x{source_h} "
                f"dans une boîte {box_w}x{box_h}"
            )
        target_w, target_h = max(target_w, 1), max(target_h, 1)
    return Dimensions(target_w, target_h)


# ---------------------------------------------
# Rééchantillonnage
# ---------------------------------------------

def bspline_resize_channel(channel: np.ndarray, new_w: int, new_h: int, order: int = 3) -> np.ndarray:
    h, w = channel.shape
    kx = min(order, w - 1)
    ky = min(order, h - 1)

    y = np.arange(h)
    x = np.arange(w)
    spline = RectBivariateSpline(y, x, channel.astype(np.float64), kx=kx, ky=ky)

    y_new = np.linspace(0, h - 1, new_h)
    x_new = np.linspace(0, w - 1, new_w)
    return spline(y_new, x_new)


def bspline_resize(image: np.ndarray, new_w: int, new_h: int, order: int = 3) -> np.ndarray:
    h, w = image.shape[:2]
    # A spline needs at least two samples per axis
    if h < 2 or w < 2:
        return cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_CUBIC)
    c = []
    for i in range(image.shape[2]):
        c.append(bspline_resize_channel(image[:, :, i], new_w, new_h, order))
    out = np.stack(c, axis=2)
    return np.clip(np.floor(out + 0.5), 0, 255).astype(np.uint8)


def resample(source: PixelBuffer, target_w: int, target_h: int, method: str = "auto") -> PixelBuffer:
    """
    Redimensionne les quatre canaux (alpha compris) indépendamment.
    - même taille : copie exacte
    - tout axe réduit : moyenne par zones (INTER_AREA), appliquée en premier
    - axe agrandi : Lanczos-4, bicubique ou B-spline cubique selon ``method``
    """
    check_positive(target_w=target_w, target_h=target_h)
    if method not in RESAMPLE_METHODS:
        raise ValueError(f"Méthode inconnue: {method!r} (choix: {', '.join(RESAMPLE_METHODS)})")

    src = source.pixels
    h, w = src.shape[:2]
    if (target_w, target_h) == (w, h):
        return source.copy()

    # 1) Réduction des axes qui rétrécissent, l'autre axe reste à sa taille source
    mid_w, mid_h = min(target_w, w), min(target_h, h)
    out = src
    if (mid_w, mid_h) != (w, h):
        out = cv2.resize(src, (mid_w, mid_h), interpolation=cv2.INTER_AREA)

    # 2) Agrandissement des axes restants
    if (mid_w, mid_h) != (target_w, target_h):
        if method == "bspline":
            out = bspline_resize(out, target_w, target_h)
        else:
            out = cv2.resize(out, (target_w, target_h), interpolation=_CV2_UPSCALE[method])
    return PixelBuffer(np.ascontiguousarray(out))


# ---------------------------------------------
# Rehaussement (noyau 3x3)
# ---------------------------------------------

def sharpen(source: PixelBuffer, border: BorderPolicy | str = BorderPolicy.COPY) -> PixelBuffer:
    """
    Applique SHARPEN_KERNEL aux canaux R, G, B des pixels intérieurs.
    L'alpha intérieur est recopié. Le cadre d'un pixel suit ``border`` :
    COPY le recopie depuis la source, ZERO le laisse noir transparent.
    """
    border = BorderPolicy(border)
    src = source.pixels
    out = src.copy() if border is BorderPolicy.COPY else np.zeros_like(src)

    h, w = src.shape[:2]
    if h < 3 or w < 3:
        return PixelBuffer(out)

    rgb = src[:, :, :3].astype(np.float32)
    filtered = cv2.filter2D(rgb, -1, SHARPEN_KERNEL, borderType=cv2.BORDER_REPLICATE)
    out[1:-1, 1:-1, :3] = np.clip(filtered[1:-1, 1:-1], 0.0, 255.0).astype(np.uint8)
    out[1:-1, 1:-1, 3] = src[1:-1, 1:-1, 3]
    return PixelBuffer(out)


# ---------------------------------------------
# Contraste et luminosité
# ---------------------------------------------

def apply_contrast(source: PixelBuffer, contrast: float) -> np.ndarray:
    """Retourne le plan RGB normalisé dans [0, 1] après contraste, sans arrondi."""
    v = source.pixels[:, :, :3].astype(np.float32) / 255.0
    return (v - 0.5) * np.float32(contrast) + 0.5


def apply_brightness(plane: np.ndarray, brightness: float, alpha: np.ndarray) -> PixelBuffer:
    v = plane * np.float32(brightness)
    rgb = np.clip(np.floor(v * 255.0 + 0.5), 0.0, 255.0).astype(np.uint8)
    return PixelBuffer(np.dstack((rgb, alpha)))


def adjust_tone(source: PixelBuffer, params: Optional[ToneParameters] = None) -> PixelBuffer:
    params = params or ToneParameters()
    plane = apply_contrast(source, params.contrast)
    return apply_brightness(plane, params.brightness, source.alpha)


# ---------------------------------------------
# Pipeline complet
# ---------------------------------------------

def enhance(
    source: PixelBuffer,
    box: Tuple[int, int] = UHD_4K,
    on_progress: Optional[ProgressCallback] = None,
    *,
    tone: Optional[ToneParameters] = None,
    border: BorderPolicy | str = BorderPolicy.COPY,
    method: str = "auto",
    clamp: bool = False,
) -> PixelBuffer:
    """
    Pipeline d'amélioration :
      1) calcul des dimensions cibles (20 %),
      2) rééchantillonnage (40 %),
      3) rehaussement 3x3 (60 %),
      4) contraste (80 %) puis luminosité (90 %),
      5) finalisation (100 %).
    Toute erreur interrompt le pipeline ; seuls les paliers atteints ont été signalés.
    """
    box_w, box_h = box
    check_positive(box_w=box_w, box_h=box_h)
    tone = tone or ToneParameters()

    def report(percent: int) -> None:
        if on_progress is not None:
            on_progress(percent)

    t0 = time.perf_counter()

    target = plan_dimensions(source.width, source.height, box_w, box_h, clamp=clamp)
    logger.debug("Dimensions: %dx%d -> %dx%d", source.width, source.height, *target)
    report(20)

    resized = resample(source, target.width, target.height, method=method)
    logger.debug("Rééchantillonnage (%s) terminé en %.3fs", method, time.perf_counter() - t0)
    report(40)

    sharpened = sharpen(resized, border=border)
    logger.debug("Rehaussement (bord=%s) terminé en %.3fs", BorderPolicy(border).value, time.perf_counter() - t0)
    report(60)

    plane = apply_contrast(sharpened, tone.contrast)
    report(80)

    result = apply_brightness(plane, tone.brightness, sharpened.alpha)
    report(90)

    logger.info(
        "Image %dx%d améliorée en %dx%d (%.2fs)",
        source.width, source.height, result.width, result.height, time.perf_counter() - t0,
    )
    report(100)
    return result


def process_one_image(
    input_image_path: Path,
    box: Tuple[int, int] = UHD_4K,
    on_progress: Optional[ProgressCallback] = None,
    **options,
) -> PixelBuffer:
    img = load_image_rgba(input_image_path)
    return enhance(img, box, on_progress, **options)
