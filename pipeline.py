r"""
Amélioration d'une image vers une résolution de classe 4K.

Fonctionnalités principales:
- Traite un fichier image unique.
- Calcule les dimensions cibles dans une boîte (3840x2160 par défaut), rééchantillonne,
  applique un noyau de rehaussement 3x3 puis un ajustement contraste/luminosité.
- Écrit le résultat en PNG sans perte dans un dossier de sortie.
- Optionnel: historise les paramètres et les métriques du run dans `models`.

Dépendances attendues (voir pyproject.toml): numpy, scipy, opencv-python-headless

Exemples d'utilisation (PowerShell):
  - Améliorer une photo vers data\enhanced
      python pipeline.py -i data\input\photo.jpg

  - Boîte personnalisée, contraste plus marqué, écraser la sortie existante
      python pipeline.py -i photo.jpg -o out --box-width 2560 --box-height 1440 --contrast 1.2 --overwrite

  - Reproduire le cadre noir transparent du rehaussement d'origine
      python pipeline.py -i photo.png --border zero
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from photo_enhancer import (
    BorderPolicy,
    EnhanceError,
    RESAMPLE_METHODS,
    ToneParameters,
    UHD_4K,
    append_run_metrics,
    ensure_dir,
    is_image_file,
    make_output_path,
    process_one_image,
    save_image,
    save_params_json,
)


logger = logging.getLogger("pipeline")


def print_progress(percent: int) -> None:
    print(f"{percent}% terminé")


# ---------------------------------------------
# Orchestration
# ---------------------------------------------

def run_pipeline_on_path(
    input_path: str,
    output_dir: str,
    box_width: int = UHD_4K.max_width,
    box_height: int = UHD_4K.max_height,
    overwrite: bool = False,
    models_dir: str | None = None,
    contrast: float = 1.10,
    brightness: float = 1.05,
    method: str = "auto",
    border: str = BorderPolicy.COPY.value,
    clamp: bool = False,
    compression: int = 9,
    show_progress: bool = True,
) -> Optional[Path]:
    """Exécute le pipeline sur un fichier. Retourne le chemin écrit, ou None si déjà présent."""
    inp = Path(input_path)
    if not inp.is_file():
        raise EnhanceError(f"Chemin introuvable: {inp}")
    if not is_image_file(inp):
        raise EnhanceError(f"Le fichier n'est pas une image supportée: {inp}")

    out_dir = Path(output_dir)
    out_path = make_output_path(inp, out_dir)
    if out_path.exists() and not overwrite:
        print(f"Déjà présent, on saute (OVERWRITE=False): {out_path}")
        return None

    tone = ToneParameters(contrast=contrast, brightness=brightness)

    # Sauvegarde des paramètres dans models_dir
    if models_dir:
        save_params_json(models_dir, {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "input": str(inp.resolve()),
            "output": str(out_path.resolve()),
            "box": [box_width, box_height],
            "overwrite": overwrite,
            "algo": {
                "method": method,
                "border": border,
                "clamp": clamp,
                "contrast": contrast,
                "brightness": brightness,
                "compression": compression,
            },
        })

    t0 = time.time()
    img_out = process_one_image(
        inp,
        box=(box_width, box_height),
        on_progress=print_progress if show_progress else None,
        tone=tone,
        border=border,
        method=method,
        clamp=clamp,
    )
    t_enhance = time.time() - t0

    ensure_dir(out_dir)
    save_image(out_path, img_out, compression=compression)
    dt = time.time() - t0

    if models_dir:
        append_run_metrics(models_dir, {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "input": str(inp.resolve()),
            "output_size": [img_out.width, img_out.height],
            "enhance_seconds": round(t_enhance, 4),
            "total_seconds": round(dt, 4),
        })

    print(f"Terminé en {dt:.2f}s. {img_out.width}x{img_out.height} -> {out_path}")
    return out_path


# ---------------------------------------------
# CLI
# ---------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Amélioration d'image vers la 4K (rééchantillonnage, rehaussement, contraste/luminosité)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--input", "-i", required=True, help="Fichier image d'entrée")
    p.add_argument("--output", "-o", default=str(Path("data") / "enhanced"), help="Dossier de sortie")
    p.add_argument("--models", default=None, help="Dossier models pour historiser paramètres et métriques")

    p.add_argument("--box-width", type=int, default=UHD_4K.max_width, help="Largeur maximale de la boîte cible")
    p.add_argument("--box-height", type=int, default=UHD_4K.max_height, help="Hauteur maximale de la boîte cible")

    p.add_argument("--overwrite", action="store_true", help="Écraser le fichier de sortie existant")

    # Paramètres algorithmiques
    p.add_argument("--contrast", type=float, default=1.10, help="Facteur de contraste")
    p.add_argument("--brightness", type=float, default=1.05, help="Facteur de luminosité")
    p.add_argument("--method", default="auto", choices=RESAMPLE_METHODS, help="Interpolation pour l'agrandissement")
    p.add_argument("--border", default=BorderPolicy.COPY.value, choices=[b.value for b in BorderPolicy],
                   help="Traitement du cadre d'un pixel lors du rehaussement")
    p.add_argument("--clamp", action="store_true", help="Ramener à 1 un axe cible arrondi à 0 au lieu d'échouer")
    p.add_argument("--compression", type=int, default=9, choices=range(10), metavar="[0-9]",
                   help="Niveau de compression PNG (sans perte)")

    p.add_argument("--quiet", "-q", action="store_true", help="Ne pas afficher la progression")
    p.add_argument("--verbose", "-v", action="store_true", help="Journalisation détaillée (DEBUG)")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run_pipeline_on_path(
            input_path=args.input,
            output_dir=args.output,
            box_width=args.box_width,
            box_height=args.box_height,
            overwrite=args.overwrite,
            models_dir=args.models,
            contrast=args.contrast,
            brightness=args.brightness,
            method=args.method,
            border=args.border,
            clamp=args.clamp,
            compression=args.compression,
            show_progress=not args.quiet,
        )
    except (EnhanceError, ValueError) as e:
        logger.error("[ERREUR] %s: %s", args.input, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
