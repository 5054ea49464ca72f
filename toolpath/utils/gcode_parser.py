"""Minimal G-code reader.

Turns G0/G1/G2/G3 lines back into motion segments so post-processing can
run on text that was produced elsewhere. Every other line is kept
verbatim as a :class:`RawLine`.
"""
import re
from typing import Dict, List

from ..models import ArcCut, Comment, LinearCut, MotionSegment, RapidMove, RawLine


WORD_PATTERN = re.compile(r'([A-Z])\s*([-+]?(?:\d+\.?\d*|\.\d+))')
MOTION_COMMANDS = {'G0': 'G0', 'G00': 'G0', 'G1': 'G1', 'G01': 'G1',
                   'G2': 'G2', 'G02': 'G2', 'G3': 'G3', 'G03': 'G3'}


def split_comment(line: str):
    """
    Split a line into its code and ``;`` comment.

    Returns:
        Tuple of (code, comment); comment is None when absent
    """
    code, sep, comment = line.partition(';')
    return code.strip(), (comment.strip() if sep else None)


def parse_words(code: str) -> Dict[str, float]:
    """Parse address words (``X1.5 Y-2``) into a letter -> value dict."""
    return {letter: float(value) for letter, value in WORD_PATTERN.findall(code.upper())}


def parse_line(line: str) -> MotionSegment:
    """
    Parse one line of G-code.

    Args:
        line: A single G-code line

    Returns:
        RapidMove, LinearCut or ArcCut for motion lines, Comment for a
        comment-only line, RawLine for anything else
    """
    code, comment = split_comment(line)
    if not code:
        if comment is not None and line.strip().startswith(';'):
            return Comment(comment)
        return RawLine(line.strip())

    command = MOTION_COMMANDS.get(code.split()[0].upper())
    words = parse_words(code[len(code.split()[0]):]) if command else {}
    if command is None or not set(words) <= set('XYZIJFE'):
        return RawLine(code, comment)

    get = words.get
    if command == 'G0':
        return RapidMove(x=get('X'), y=get('Y'), z=get('Z'), comment=comment)
    if command == 'G1':
        return LinearCut(x=get('X'), y=get('Y'), z=get('Z'), f=get('F'), e=get('E'), comment=comment)
    if get('X') is None or get('Y') is None:
        return RawLine(code, comment)
    return ArcCut(
        command=command,
        x=words['X'],
        y=words['Y'],
        i=get('I', 0.0),
        j=get('J', 0.0),
        z=get('Z'),
        f=get('F'),
        e=get('E'),
        comment=comment,
    )


def parse_gcode(text: str) -> List[MotionSegment]:
    """Parse a whole program, one segment per line."""
    return [parse_line(line) for line in text.splitlines()]
