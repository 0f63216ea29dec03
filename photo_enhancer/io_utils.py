from __future__ import annotations

from pathlib import Path

import numpy as np
import cv2

from .buffer import PixelBuffer
from .errors import DecodeError, EncodeError


SUPPORTED_EXTS = {".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"}
ALPHA_EXTS = {".png", ".tif", ".tiff", ".webp"}

_TO_RGBA = {
    1: cv2.COLOR_GRAY2RGBA,
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def is_image_file(p: Path) -> bool:
    return p.is_file() and (p.suffix.lower() in SUPPORTED_EXTS)


def make_output_path(inp: Path, output_dir: Path, suffix: str = "_4k") -> Path:
    # Toujours en PNG: la sortie est encodée sans perte
    return output_dir / f"{inp.stem}{suffix}.png"


def _read(path: str | Path) -> np.ndarray | None:
    # IMREAD_UNCHANGED garde l'alpha mais ignore l'orientation EXIF
    if Path(path).suffix.lower() in ALPHA_EXTS:
        img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if img is not None and img.ndim == 3 and img.shape[2] == 4:
            return img
    return cv2.imread(str(path), cv2.IMREAD_ANYCOLOR | cv2.IMREAD_ANYDEPTH)


def load_image_rgba(path: str | Path) -> PixelBuffer:
    """Décode un fichier image en PixelBuffer RGBA8 (alpha opaque si absent).

    L'orientation EXIF est appliquée, sauf pour les fichiers avec canal alpha.
    """
    img = _read(path)
    if img is None:
        raise DecodeError(f"Impossible de charger le fichier: {path}")

    if img.dtype == np.uint16:
        img = np.floor(img / 257.0 + 0.5).astype(np.uint8)
    elif img.dtype != np.uint8:
        raise DecodeError(f"Profondeur non supportée ({img.dtype}): {path}")

    if img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]
    channels = 1 if img.ndim == 2 else img.shape[2]
    if channels not in _TO_RGBA:
        raise DecodeError(f"Nombre de canaux non supporté ({channels}): {path}")

    rgba = cv2.cvtColor(img, _TO_RGBA[channels])
    return PixelBuffer(np.ascontiguousarray(rgba))


def save_image(path: Path, image: PixelBuffer, compression: int = 9) -> None:
    """Encode en PNG sans perte; ``compression`` va de 0 (rapide) à 9 (maximum)."""
    ensure_dir(path.parent)
    bgra = cv2.cvtColor(image.pixels, cv2.COLOR_RGBA2BGRA)
    try:
        ok = cv2.imwrite(str(path), bgra, [cv2.IMWRITE_PNG_COMPRESSION, int(compression)])
    except cv2.error as e:
        raise EncodeError(f"Echec d'écriture: {path} ({e})") from e
    if not ok:
        raise EncodeError(f"Echec d'écriture: {path}")
