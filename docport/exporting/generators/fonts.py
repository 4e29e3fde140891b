from functools import lru_cache

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont

# Adobe-Korea1 CID fonts bundled with every PDF viewer; nothing is embedded.
SERIF_FONT = "HYSMyeongJo-Medium"
SANS_FONT = "HYGothic-Medium"
LATIN_FONT = "Helvetica"


@lru_cache(maxsize=None)
def register_korean_fonts() -> tuple[str, str]:
    """Register the Korean CID fonts once per process and return their names."""
    for name in (SERIF_FONT, SANS_FONT):
        pdfmetrics.registerFont(UnicodeCIDFont(name))
    return SERIF_FONT, SANS_FONT
