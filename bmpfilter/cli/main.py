# cli/main.py
"""
Command-line front end.

    bmpfilter photo.bmp --grayscale
    bmpfilter photo.bmp --kernel sobel-y -o edges.bmp
    bmpfilter photo.bmp --weights 1 1 1 1 1 1 1 1 1
    bmpfilter --interactive
"""
from __future__ import annotations

import argparse
import logging
import re
import sys
from typing import Callable, List, Optional

from .. import config
from ..exceptions import BmpError
from ..models.kernel import Kernel, PRESETS, get_preset, SOBEL_X, SOBEL_Y, LAPLACIAN
from ..models.operation import Operation
from ..pipeline.process_image import default_output_path, process_file
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)

# kernel sub-menu of the interactive mode
KERNEL_MENU = {
    "1": SOBEL_X,
    "2": SOBEL_Y,
    "3": LAPLACIAN,
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bmpfilter",
        description="Grayscale or 3x3-convolve an uncompressed 24-bit BMP.",
    )
    ap.add_argument("input", nargs="?", help="input .bmp (24 bpp, uncompressed)")
    ap.add_argument("-o", "--output", help="output .bmp (default: <input>_gray.bmp / <input>_conv.bmp)")

    op = ap.add_mutually_exclusive_group()
    op.add_argument("--grayscale", action="store_true", help="luminance reduction only")
    op.add_argument("--kernel", metavar="NAME",
                    help=f"grayscale, then convolve with a preset ({', '.join(PRESETS)})")
    op.add_argument("--weights", nargs=9, type=float, metavar="W",
                    help="grayscale, then convolve with 9 custom weights given row by row")

    ap.add_argument("--info", action="store_true", help="print the input's header fields")
    ap.add_argument("--list-kernels", action="store_true", help="print the preset kernels and exit")
    ap.add_argument("--interactive", action="store_true", help="prompt for everything, menu style")
    ap.add_argument("--log-level", default=config.LOG_LEVEL, help="DEBUG, INFO, WARNING, ...")
    return ap


def operation_from_args(args: argparse.Namespace) -> Optional[Operation]:
    if args.grayscale:
        return Operation.grayscale()
    if args.kernel:
        return Operation.convolve(get_preset(args.kernel))
    if args.weights:
        return Operation.convolve(Kernel.from_values(args.weights))
    return None


def format_kernel(kernel: Kernel) -> str:
    rows = ["  [" + ", ".join(f"{w:g}" for w in row) + "]" for row in kernel.as_lists()]
    return f"{kernel.name} (normalizer {kernel.normalizer:g})\n" + "\n".join(rows)


# ─── Interactive mode ─────────────────────────────────────────────
def _read_weights(ask: Callable[[str], str]) -> Kernel:
    """Collect nine numbers, spread over as many lines as the user likes."""
    values: List[str] = []
    while len(values) < 9:
        prompt = "Enter the 9 kernel values (row by row): " if not values else f"{9 - len(values)} more: "
        values.extend(t for t in re.split(r"[\s,;]+", ask(prompt)) if t)
    return Kernel.from_values(values[:9])


def run_interactive(
    image_service: ImageService,
    ask: Callable[[str], str] = input,
    say: Callable[[str], None] = print,
) -> int:
    try:
        in_path = ask("Input BMP path (24 bpp, uncompressed): ").strip()
        image = image_service.load(in_path)

        say("\nMENU")
        say("1) Grayscale")
        say("2) 3x3 convolution (choose a kernel)")
        choice = ask("Select an option: ").strip()

        if choice == "1":
            operation = Operation.grayscale()
        elif choice == "2":
            say("\nSelect a kernel:")
            say("1) Sobel X (vertical edges)")
            say("2) Sobel Y (horizontal edges)")
            say("3) Laplacian (edges in every direction)")
            say("4) Custom (enter 9 values)")
            kernel_choice = ask("Option: ").strip()
            if kernel_choice == "4":
                kernel = _read_weights(ask)
            else:
                kernel = KERNEL_MENU.get(kernel_choice)
                if kernel is None:
                    kernel = get_preset(config.DEFAULT_KERNEL)
                    say(f"Unknown option, using {kernel.name}.")
            operation = Operation.convolve(kernel)
        else:
            say("Invalid option.")
            return 0

        suggested = default_output_path(in_path, operation)
        out_path = ask(f"Output BMP name (e.g. {suggested.name}): ").strip() or str(suggested)

        image_service.apply(image, operation)
        image_service.save(image, out_path)
        say(f"Saved OK: {out_path}")
        return 0

    except EOFError:
        return 0
    except (BmpError, OSError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


# ─── Entry point ──────────────────────────────────────────────────
def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    config.configure_logging(args.log_level)

    image_service = ImageService()

    if args.list_kernels:
        for kernel in PRESETS.values():
            print(format_kernel(kernel))
        return 0

    if args.interactive:
        return run_interactive(image_service)

    if not args.input:
        ap.error("an input file is required (or use --interactive / --list-kernels)")

    try:
        operation = operation_from_args(args)
        if args.info:
            for k, v in image_service.metadata(image_service.load(args.input)).items():
                print(f"{k}: {v}")
        if operation is None:
            if not args.info:
                ap.error("choose an operation: --grayscale, --kernel NAME or --weights W*9")
            return 0

        image = process_file(args.input, operation, args.output, image_service=image_service)
        print(f"Saved OK: {image.path}")
        return 0

    except (BmpError, OSError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
