import json
import logging
import os
import sys

import cv2

from .core import detect_holds, resolve_point
from .errors import NoShapesFoundError
from .types import NormalizedPoint
from .visualize import draw_holds_on_image

USAGE = 'Usage: hold-extract "inputs/wall.jpg" [X Y]'


def setup_logging(log_level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv=None):
    argv = sys.argv if argv is None else argv
    if len(argv) not in (2, 4):
        print(USAGE)
        sys.exit(2)

    setup_logging(os.environ.get("HOLD_EXTRACT_LOG_LEVEL", "INFO").upper())
    in_path = argv[1]

    img = cv2.imread(in_path, cv2.IMREAD_COLOR)
    if img is None:
        raise FileNotFoundError(f"Cannot read image: {in_path}")

    os.makedirs("outputs", exist_ok=True)
    base = os.path.splitext(os.path.basename(in_path))[0]
    json_path = os.path.join("outputs", f"{base}.json")
    vis_path = os.path.join("outputs", f"{base}.jpg")

    if len(argv) == 4:
        point = NormalizedPoint(float(argv[2]), float(argv[3]))
        hold = resolve_point(img, point)
        holds = [hold] if hold is not None else []
        if hold is None:
            print(f"[--] No hold near ({point.x:.3f}, {point.y:.3f})")
    else:
        try:
            holds = detect_holds(img)
        except NoShapesFoundError as e:
            print(f"[--] {e}")
            sys.exit(1)

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump({"holds": [h.to_dict() for h in holds]}, f, ensure_ascii=False, indent=2)
    print(f"[OK] Wrote JSON to: {json_path}")

    vis = draw_holds_on_image(img, holds)
    ok = cv2.imwrite(vis_path, vis)
    if not ok:
        raise RuntimeError(f"Failed to write image: {vis_path}")
    print(f"[OK] Wrote visualization to: {vis_path}")


if __name__ == "__main__":
    main()
