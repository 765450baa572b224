"""
CLI to score a candidate image against a target image -> JSON.
"""
from __future__ import annotations
import argparse, json, os
import cv2
from arview.config import Settings
from arview.errors import DecodeError, EmptyInputError
from arview.imaging import decode_image
from arview.similarity import score_images
from arview.visual import draw_match_label

def main(argv=None) -> int:
    p = argparse.ArgumentParser()
    p.add_argument("--target", required=True, help="Reference image path or URL")
    p.add_argument("--candidate", required=True, help="Image to check, path or URL")
    p.add_argument("--out", default=None, help="Optional path to output JSON")
    p.add_argument("--annotate", default=None, help="Optional path for the candidate stamped with the result")
    args = p.parse_args(argv)

    settings = Settings()
    try:
        target = decode_image(args.target, timeout=settings.HTTP_TIMEOUT)
        candidate = decode_image(args.candidate, timeout=settings.HTTP_TIMEOUT)
    except (DecodeError, EmptyInputError) as e:
        print(f"error: {e}")
        return 2

    result = score_images(target, candidate)
    payload = result.model_dump(mode="json")
    print(json.dumps(payload, indent=2, ensure_ascii=False))

    if args.out:
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        print(f"Result written to {args.out}")
    if args.annotate:
        cv2.imwrite(args.annotate, draw_match_label(candidate.to_bgr(), result))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
