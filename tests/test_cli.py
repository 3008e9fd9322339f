import json
import cv2
from scripts.cli import main

def test_cli_detect_and_write(tmp_path, face_frame, capsys):
    img = tmp_path / "face.png"
    cv2.imwrite(str(img), face_frame)
    out = tmp_path / "out" / "analysis.json"
    annotated = tmp_path / "annotated.png"

    res = main(["--image", str(img), "--analyzer", "heuristic", "--mood",
                "--annotate", str(annotated), "--out", str(out)])

    assert res["detection"]["type"] == "single_face"
    # heuristic analyzer cannot read expressions
    assert res["mood"] is None and res["mood_error"]
    assert json.loads(out.read_text(encoding="utf-8")) == res
    assert annotated.exists()
    assert '"single_face"' in capsys.readouterr().out

def test_cli_reads_the_image_once(tmp_path, face_frame, monkeypatch):
    import scripts.cli as cli
    img = tmp_path / "face.png"
    cv2.imwrite(str(img), face_frame)
    loads = []
    real_load = cli.RasterImage.load
    monkeypatch.setattr(cli.RasterImage, "load", lambda path: loads.append(path) or real_load(path))

    res = main(["--image", str(img), "--analyzer", "heuristic", "--mood",
                "--annotate", str(tmp_path / "annotated.png")])

    assert loads == [str(img)]
    assert res["detection"]["count"] == 1
    assert cv2.imread(str(tmp_path / "annotated.png")).shape == face_frame.shape
