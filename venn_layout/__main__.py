import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from venn_layout import (
    InvalidAreaError,
    LayoutOptions,
    VennDiagram,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _load_areas(path: str) -> List[Any]:
    with open(path) as fin:
        data = json.load(fin)
    if isinstance(data, dict):
        data = data.get("areas", [])
    if not isinstance(data, list):
        raise InvalidAreaError(f"expected a JSON list of area records in {path}")
    return data


def _render(diagram: VennDiagram, loss: float) -> Dict[str, Any]:
    return {
        "circles": {
            setid: {"x": c.x, "y": c.y, "radius": c.radius}
            for setid, c in diagram.circles.items()
        },
        "centres": {
            key: {"x": centre.x, "y": centre.y, "disjoint": centre.disjoint}
            for key, centre in diagram.centres.items()
        },
        "loss": loss,
    }


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Lay out area-proportional Venn diagrams")
    parser.add_argument("path", help='Path to a JSON list of {"sets": [...], "size": n} records')
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the initial layout restarts",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=500,
        help="Refinement iteration budget (default: 500)",
    )
    parser.add_argument("--width", type=float, default=600.0, help="Viewport width (default: 600)")
    parser.add_argument("--height", type=float, default=350.0, help="Viewport height (default: 350)")
    parser.add_argument("--padding", type=float, default=15.0, help="Viewport padding (default: 15)")
    parser.add_argument(
        "--no-normalize",
        action="store_true",
        help="Skip cluster orientation and tiling",
    )
    parser.add_argument(
        "--output",
        help="Write the layout JSON to the given path instead of stdout",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Reading areas from %s", args.path)
    try:
        areas = _load_areas(args.path)
        options = LayoutOptions(
            max_iterations=args.max_iterations,
            random_seed=args.seed,
            normalize=not args.no_normalize,
            width=args.width,
            height=args.height,
            padding=args.padding,
        )
        diagram = VennDiagram(options)
        diagram.layout(areas)
    except InvalidAreaError as exc:
        logger.error("Invalid input: %s", exc)
        raise SystemExit(1)

    loss = diagram.loss
    logger.info("Final loss: %.6g", loss)
    rendered = json.dumps(_render(diagram, loss), indent=2)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing layout to %s", output_path)
        output_path.write_text(rendered + "\n", encoding="utf-8")
    else:
        print(rendered)


if __name__ == "__main__":
    main(sys.argv[1:])
