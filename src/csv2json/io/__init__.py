"""Line-oriented input and output helpers."""

from csv2json.io.lines import iter_lines, open_input, open_output

__all__ = ["iter_lines", "open_input", "open_output"]
