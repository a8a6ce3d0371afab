# compositor.py
import io
from collections import namedtuple

from PIL import Image, UnidentifiedImageError

from nft_studio.errors import AssetLoadWarning
from nft_studio.logs import safe_log

DEFAULT_CANVAS_SIZE = (1000, 1000)
RESAMPLE_LANCZOS = Image.Resampling.LANCZOS

# key: cache key of the decoded image, label: 'Layer:Trait' or legendary name
DrawOp = namedtuple("DrawOp", ["key", "label"])


def trait_key(layer, trait):
    return ("trait", layer.id, trait.id)


def legendary_key(item):
    return ("legendary", item.id)


def decode_image(data, canvas_size):
    """Bytes -> RGBA image scaled to fill the canvas."""
    img = Image.open(io.BytesIO(data))
    img.load()
    img = img.convert("RGBA")
    if img.size != tuple(canvas_size):
        img = img.resize(tuple(canvas_size), RESAMPLE_LANCZOS)
    return img


class ImageCache:
    """
    Decoded images keyed by identity. Filled once before the slot loop and
    read-only afterwards. Assets that fail to load are recorded as warnings
    and simply absent from the cache.
    """

    def __init__(self, canvas_size=DEFAULT_CANVAS_SIZE):
        self.canvas_size = tuple(canvas_size)
        self._images = {}
        self.warnings = []

    def __contains__(self, key):
        return key in self._images

    def get(self, key):
        return self._images.get(key)

    def add(self, key, owner_id, label, data, log_callback=None):
        if key in self._images:
            return self._images[key]
        if not data:
            return self._fail(owner_id, label, "no image data", log_callback)
        try:
            img = decode_image(data, self.canvas_size)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            return self._fail(owner_id, label, str(e), log_callback)
        self._images[key] = img
        return img

    def _fail(self, owner_id, label, reason, log_callback):
        warning = AssetLoadWarning(owner_id, label, reason)
        self.warnings.append(warning)
        safe_log(log_callback, f"⚠️ {warning}")
        return None

    @classmethod
    def preload(cls, layers, legendaries, canvas_size=DEFAULT_CANVAS_SIZE, log_callback=None):
        cache = cls(canvas_size)
        for layer in layers:
            for trait in layer.traits:
                cache.add(trait_key(layer, trait), trait.id, f"{layer.name}:{trait.name}", trait.image, log_callback)
        for item in legendaries:
            cache.add(legendary_key(item), item.id, item.name or item.id, item.image, log_callback)
        return cache


def build_draw_ops(selection):
    """Bottom-most first."""
    return [DrawOp(trait_key(layer, trait), f"{layer.name}:{trait.name}") for layer, trait in selection]


def legendary_draw_ops(item):
    return [DrawOp(legendary_key(item), item.name or item.id)]


def composite(ops, cache):
    """
    Alpha-over each op onto a cleared canvas in order.
    Ops whose image is not in the cache are skipped.
    """
    canvas = Image.new("RGBA", cache.canvas_size, (0, 0, 0, 0))
    for op in ops:
        img = cache.get(op.key)
        if img is None:
            continue
        canvas = Image.alpha_composite(canvas, img)
    return canvas


def encode_png(image):
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
