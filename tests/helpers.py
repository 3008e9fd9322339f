"""Plain helpers shared by test modules (pytest puts tests/ on sys.path)."""
import numpy as np

# RGB sample inside the "light" skin band
SKIN_RGB = (150, 100, 80)
# same colour in OpenCV channel order
SKIN_BGR = (80, 100, 150)


def rgba_canvas(width, height, fill=(0, 0, 0)):
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., :3] = fill
    arr[..., 3] = 255
    return arr


def paint(arr, x, y, w, h, rgb=SKIN_RGB):
    arr[y:y + h, x:x + w, :3] = rgb
    return arr


class DummyCam:
    """Stands in for cv2.VideoCapture."""
    def __init__(self, frame=None, opened=True):
        self.frame = frame
        self.opened = opened
        self.released = False
        self.props = {}
    def isOpened(self): return self.opened
    def read(self):
        if self.frame is None:
            return False, None
        return True, self.frame.copy()
    def set(self, prop, value): self.props[prop] = value
    def release(self): self.released = True


class UnpluggedCam(DummyCam):
    """Opens fine, then the device disappears on read."""
    def read(self):
        raise RuntimeError("device unplugged")
