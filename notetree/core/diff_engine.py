"""
Line diff and similarity scoring between two revisions of a note.

The line diff is positional: line ``i`` of the old text is compared with
line ``i`` of the new text. Inserting a line near the top therefore shows
every following line as modified. This is not a longest-common-subsequence
diff.
"""
import math
from typing import Any, List, Union

from notetree.models.revision import DiffResult, Revision, RevisionComparison

MODIFIED_ARROW = "→"


def split_lines(text: str) -> List[str]:
    """
    Split text on newlines. An empty string is a single empty line.
    """
    return text.split("\n")


def diff_lines(old_text: str, new_text: str) -> DiffResult:
    """
    Compare two texts line by line at matching positions.

    Args:
        old_text: The older revision's content.
        new_text: The newer revision's content.

    Returns:
        A DiffResult. Entries are formatted ``+N: line`` for added lines
        (new line number), ``-N: line`` for removed lines (old line number)
        and ``~N: old → new`` for changed lines. Numbers are 1-based.
    """
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)
    result = DiffResult()

    for index in range(max(len(old_lines), len(new_lines))):
        number = index + 1
        if index >= len(old_lines):
            result.added.append(f"+{number}: {new_lines[index]}")
        elif index >= len(new_lines):
            result.removed.append(f"-{number}: {old_lines[index]}")
        elif old_lines[index] != new_lines[index]:
            result.modified.append(
                f"~{number}: {old_lines[index]} {MODIFIED_ARROW} {new_lines[index]}"
            )
        else:
            result.unchanged += 1

    return result


def levenshtein_distance(source: str, target: str) -> int:
    """
    Edit distance with unit-cost insertion, deletion and substitution.

    Runs in O(len(source) * len(target)) time, which is fine for notes but
    not for large documents.
    """
    if not source:
        return len(target)
    if not target:
        return len(source)

    previous = list(range(len(target) + 1))
    for i, source_char in enumerate(source, start=1):
        current = [i] + [0] * len(target)
        for j, target_char in enumerate(target, start=1):
            cost = 0 if source_char == target_char else 1
            current[j] = min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current

    return previous[len(target)]


def similarity(old_text: str, new_text: str) -> int:
    """
    Score how close two texts are, from 0 to 100.

    Identical texts score 100. If exactly one side is empty the score is 0.
    Otherwise the score is the normalized edit distance, rounded half up
    and capped at 99.
    """
    if old_text == new_text:
        return 100
    if not old_text or not new_text:
        return 0

    max_len = max(len(old_text), len(new_text))
    distance = levenshtein_distance(old_text, new_text)
    score = int(math.floor(100 * (max_len - distance) / max_len + 0.5))
    # 100 is reserved for identical texts
    return min(score, 99)


def _content(revision: Union[Revision, str, Any]) -> str:
    if isinstance(revision, str):
        return revision
    return getattr(revision, "content", "") or ""


def compare_revisions(old_revision: Union[Revision, str],
                      new_revision: Union[Revision, str]) -> RevisionComparison:
    """
    Diff and score two revisions.

    Args:
        old_revision: The older snapshot, a Revision or plain text.
        new_revision: The newer snapshot, a Revision or plain text.

    Returns:
        A RevisionComparison holding both inputs, the diff and the similarity.
    """
    old_text = _content(old_revision)
    new_text = _content(new_revision)
    return RevisionComparison(
        old_revision=old_revision,
        new_revision=new_revision,
        diff=diff_lines(old_text, new_text),
        similarity=similarity(old_text, new_text),
    )
