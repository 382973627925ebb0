"""Shared text formatting for struct and report display."""

from prettytable import PrettyTable, TableStyle

WIDTH = 78
THICK_SEP = "=" * WIDTH


def make_table(headers, rows, align_map=None):
    """Create a PrettyTable with SINGLE_BORDER style and per-column alignment."""
    align_map = align_map or {}
    t = PrettyTable()
    t.set_style(TableStyle.SINGLE_BORDER)
    t.field_names = headers
    for row in rows:
        t.add_row(row)
    for h in headers:
        t.align[h] = align_map.get(h, "l")
    return str(t)


def format_title(title, subtitle=None):
    """Return title block lines with thick separators."""
    lines = [THICK_SEP, f" {title}"]
    if subtitle is not None:
        lines.append(f" {subtitle}")
    lines.append(THICK_SEP)
    return lines


def format_kv_line(key, value, indent=1):
    """Format a key-value pair with indentation."""
    return f"{' ' * indent}{key}: {value}"


def format_shape(shape):
    """Format an element shape; ragged shapes are tuples of tuples."""
    if shape and all(isinstance(s, tuple) for s in shape):
        if len(shape) > 3:
            inner = ", ".join(str(s) for s in shape[:3])
            return f"{len(shape)} x [{inner}, ...]"
        return f"{len(shape)} x [{', '.join(str(s) for s in shape)}]"
    return str(tuple(shape))


def adjust_separators(lines):
    """Widen separator lines to match the widest content line."""
    max_w = max((len(line) for line in lines), default=WIDTH)
    max_w = max(max_w, WIDTH)
    return [
        "=" * max_w
        if line and all(c == "=" for c in line)
        else "-" * max_w
        if line and all(c == "-" for c in line)
        else line
        for line in lines
    ]


def attach_format(target_class, format_func):
    """Monkey-patch ``__repr__`` and ``__str__`` on a class."""

    def _repr(self):
        return format_func(self)

    def _str(self):
        return format_func(self)

    target_class.__repr__ = _repr
    target_class.__str__ = _str
