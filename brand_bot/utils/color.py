import re

_HEX_RE = re.compile(r'#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})')
_RGB_RE = re.compile(r'rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[\d.]+%?\s*)?\)')


def normalize_hex_color(value):
    """
    Normalize a CSS color value to an uppercase hex token

    Accepts #RGB, #RRGGBB and rgb()/rgba() values. Named colors and
    anything else are rejected.

    Args:
        value (str): Color value as found in the page

    Returns:
        str: "#RRGGBB" or "#RGB", or None if the value is not usable
    """
    if not value:
        return None

    value = value.strip()

    match = _HEX_RE.fullmatch(value)
    if match:
        return '#' + match.group(1).upper()

    match = _RGB_RE.fullmatch(value.lower())
    if match:
        channels = [int(c) for c in match.groups()]
        if any(c > 255 for c in channels):
            return None
        return '#' + ''.join(f'{c:02X}' for c in channels)

    return None


def same_color(first, second):
    """Compare two hex colors ignoring case and short form"""
    def expand(color):
        color = normalize_hex_color(color)
        if color and len(color) == 4:
            color = '#' + ''.join(ch * 2 for ch in color[1:])
        return color

    a, b = expand(first), expand(second)
    return a is not None and a == b
