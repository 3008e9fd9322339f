"""
CLI to analyze a picture -> JSON.
"""
from __future__ import annotations
import argparse, json, logging
from core.config import Settings
from core.analyzers import ExpressionUnavailableError, probe_analyzer
from core.detection import detect_faces
from core.image import RasterImage
from core.mood import mood_from_expressions
from core.visual import write_annotated

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--image", required=True, help="Path to input image")
    p.add_argument("--analyzer", default=None, help="auto | deepface | opencv | heuristic")
    p.add_argument("--mood", action="store_true", help="Also classify expression and recommend movies")
    p.add_argument("--annotate", default=None, help="Write an annotated copy of the image here")
    p.add_argument("--out", default=None, help="Path to output JSON")
    args = p.parse_args(argv)

    overrides = {"ANALYZER": args.analyzer} if args.analyzer else {}
    settings = Settings(**overrides)
    logging.basicConfig(level=settings.LOG_LEVEL)
    analyzer = probe_analyzer(settings)

    image = RasterImage.load(args.image)
    detection = detect_faces(image, analyzer, settings)
    if args.annotate:
        write_annotated(image, detection, args.annotate)
    result = {"detection": detection.model_dump()}

    if args.mood:
        try:
            scores = analyzer.classify_expressions(image)
            result["mood"] = mood_from_expressions(scores).model_dump()
        except (ExpressionUnavailableError, ValueError) as e:
            result["mood"] = None
            result["mood_error"] = str(e)

    print(json.dumps(result, indent=2, ensure_ascii=False))

    if args.out:
        import os
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2, ensure_ascii=False)
        print(f"Analysis written to {args.out}")
    return result

if __name__ == "__main__":
    main()
