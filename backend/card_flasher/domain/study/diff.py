# backend/card_flasher/domain/study/diff.py

from .dto import WritingSegment, WritingTone


def normalize_answer(value: str) -> str:
    return value.strip().lower()


def is_writing_correct(expected: str, actual: str) -> bool:
    """Writing mode accepts the answer only on exact match after trim + lower-case."""
    return normalize_answer(expected) == normalize_answer(actual)


def build_writing_segments(expected: str, actual: str) -> list[WritingSegment]:
    """
    Character alignment of the typed text against the expected phrase.
    Used only to highlight the answer, correctness is decided by is_writing_correct.

    Edit distance with insertion = deletion = 1 and substitution = 0 for a
    case-insensitive match, 1 otherwise. The path is rebuilt from the bottom
    right corner, preferring diagonal, then an extra typed char, then a
    missing expected char.
    """
    expected_lower = expected.lower()
    actual_lower = actual.lower()
    n = len(expected)
    m = len(actual)

    # matrix[i][j]: distance between expected[:i] and actual[:j]
    matrix = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n + 1):
        matrix[i][0] = i
    for j in range(m + 1):
        matrix[0][j] = j

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            cost = 0 if expected_lower[i - 1] == actual_lower[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,
                matrix[i][j - 1] + 1,
                matrix[i - 1][j - 1] + cost,
            )

    segments: list[WritingSegment] = []
    i, j = n, m
    while i > 0 or j > 0:
        if i > 0 and j > 0:
            same = expected_lower[i - 1] == actual_lower[j - 1]
            if matrix[i][j] == matrix[i - 1][j - 1] + (0 if same else 1):
                tone = WritingTone.good if same else WritingTone.bad
                segments.append(WritingSegment(char=actual[j - 1], tone=tone))
                i -= 1
                j -= 1
                continue

        if j > 0 and matrix[i][j] == matrix[i][j - 1] + 1:
            segments.append(WritingSegment(char=actual[j - 1], tone=WritingTone.bad))
            j -= 1
            continue

        # i > 0 here: with j == 0 the horizontal branch cannot match
        segments.append(WritingSegment(char=expected[i - 1], tone=WritingTone.missing))
        i -= 1

    segments.reverse()
    return segments
