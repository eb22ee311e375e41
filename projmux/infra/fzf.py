"""
Interactive fuzzy selection through fzf.

Candidates are opaque: they are stringified for display and the picked
lines are mapped back to the original objects, in candidate order.
"""

from typing import List, Optional, Sequence, TypeVar
import logging

from ..exit_codes import NoItemSelectedError, NoItemsFoundError
from .process import Runner, run_process

logger = logging.getLogger(__name__)

T = TypeVar('T')


class FzfPicker:
    """
    Single and multi select over a candidate list.

    Example:
        picker = FzfPicker()
        project = picker.pick_one(projects)
        sessions = picker.pick_many(["0", "dotfiles", "work"])
    """

    def __init__(
        self,
        command: str = "fzf",
        args: Optional[Sequence[str]] = None,
        runner: Optional[Runner] = None,
    ):
        """
        Initialize FzfPicker.

        Args:
            command: Picker executable
            args: Extra arguments passed on every invocation
            runner: Process runner (default: run_process)
        """
        self.command = command
        self.args = list(args or [])
        self.runner = runner or run_process

    def _run(self, lines: List[str], extra: Sequence[str] = ()) -> Optional[List[str]]:
        """Run the picker; None when the user aborted."""
        result = self.runner(
            [self.command, *self.args, *extra],
            input="\n".join(lines) + "\n",
            capture_stderr=False,
        )
        if not result.ok:
            logger.debug(f"picker exited with {result.returncode}")
            return None
        return [line for line in result.stdout.splitlines() if line.strip()]

    @staticmethod
    def _match(items: Sequence[T], labels: List[str], picked: List[str]) -> List[T]:
        chosen = set(picked)
        return [item for item, label in zip(items, labels) if label in chosen]

    def pick_one(self, items: Sequence[T]) -> T:
        """
        Let the user choose exactly one item.

        Raises:
            NoItemsFoundError: if items is empty (nothing is spawned)
            NoItemSelectedError: if the user aborted or picked nothing
        """
        if not items:
            raise NoItemsFoundError()

        labels = [str(i) for i in items]
        picked = self._run(labels)
        if not picked:
            raise NoItemSelectedError()

        matches = self._match(items, labels, picked[:1])
        if not matches:
            raise NoItemSelectedError()
        return matches[0]

    def pick_many(self, items: Sequence[T]) -> List[T]:
        """
        Let the user choose any number of items.

        An abort yields an empty list; only an empty candidate list is an error.

        Raises:
            NoItemsFoundError: if items is empty (nothing is spawned)
        """
        if not items:
            raise NoItemsFoundError()

        labels = [str(i) for i in items]
        picked = self._run(labels, ['--multi']) or []
        logger.debug(f"picked: {picked}")
        return self._match(items, labels, picked)
