"""File-backed run history.

The history file is tab-separated, one run per line::

    timestamp  duration  run_name  status  revision_id  session_id  command

The launcher reads it to reject duplicate names and to mint fresh ones; the
CLI appends a line once a run has been handed to the cluster. Names are
compared in their pod-name form, so ``happy_turing`` and ``happy-turing``
are the same run.
"""

from __future__ import annotations

import random
import uuid
from collections.abc import Iterator
from dataclasses import astuple, dataclass
from datetime import datetime
from pathlib import Path

from kuberun.core.errors import HistoryError
from kuberun.core.logging import get_logger
from kuberun.launch.naming import normalize_run_name

logger = get_logger(__name__)

ADJECTIVES = (
    "admiring", "agitated", "amazing", "angry", "awesome", "berserk", "big",
    "boring", "clever", "cheeky", "condescending", "cranky", "crazy", "curious",
    "distracted", "drunk", "ecstatic", "elated", "elegant", "evil", "fabulous",
    "focused", "furious", "gigantic", "goofy", "grave", "happy", "high",
    "hopeful", "hungry", "infallible", "jolly", "jovial", "kickass", "lonely",
    "loving", "mad", "modest", "naughty", "nauseous", "nostalgic", "pedantic",
    "pensive", "prickly", "reverent", "romantic", "sad", "serene", "sharp",
    "shrivelled", "sick", "silly", "sleepy", "small", "stoic", "stupefied",
    "suspicious", "tender", "thirsty", "tiny", "trusting", "voluminous",
    "wise", "zen",
)

SCIENTISTS = (
    "agnesi", "albattani", "archimedes", "ardinghelli", "babbage", "bardeen",
    "bartik", "bell", "blackwell", "bohr", "brattain", "brown", "carson",
    "colden", "cori", "curie", "darwin", "davinci", "einstein", "elion",
    "engelbart", "euclid", "fermat", "fermi", "feynman", "franklin", "galileo",
    "goldstine", "goodall", "hawking", "heisenberg", "hodgkin", "hoover",
    "hopper", "hypatia", "jang", "jones", "kalam", "keller", "kirch",
    "kowalevski", "lalande", "leakey", "lovelace", "lumiere", "mayer",
    "mccarthy", "mcclintock", "meitner", "mendel", "meninsky", "morse",
    "newton", "nobel", "noether", "pare", "pasteur", "payne", "perlman",
    "pike", "poincare", "ptolemy", "raman", "ritchie", "rosalind", "sammet",
    "shockley", "sinoussi", "stallman", "swartz", "tesla", "thompson",
    "torvalds", "turing", "varahamihira", "wescoff", "wilson", "wing",
    "wozniak", "wright", "yalow", "yonath",
)

MAX_NAME_ATTEMPTS = 100


def random_run_name(rng: random.Random | None = None) -> str:
    """Return a random ``adjective_scientist`` name."""
    rng = rng or random
    return f"{rng.choice(ADJECTIVES)}_{rng.choice(SCIENTISTS)}"


@dataclass(frozen=True)
class HistoryRecord:
    """One recorded run."""

    timestamp: str
    duration: str
    run_name: str
    status: str
    revision_id: str
    session_id: str
    command: str

    @classmethod
    def parse(cls, line: str) -> HistoryRecord | None:
        """Parse one history line; returns None for blank or short lines."""
        cols = line.rstrip("\n").split("\t")
        if len(cols) < 7:
            return None
        return cls(*cols[:6], command="\t".join(cols[6:]))

    def to_line(self) -> str:
        """Serialize as one history line (tabs and newlines in values become spaces)."""
        cols = [" ".join(str(v).split()) or "-" for v in astuple(self)]
        return "\t".join(cols) + "\n"


class FileHistoryStore:
    """History store backed by a tab-separated file.

    Parameters
    ----------
    path
        History file location. A missing file is an empty history.
    disabled
        When True the store reports ``enabled == False``, cannot mint
        names and records nothing.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        disabled: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.path = Path(path)
        self.disabled = disabled
        self._rng = rng or random.Random()

    @property
    def enabled(self) -> bool:
        return not self.disabled

    def records(self) -> Iterator[HistoryRecord]:
        """Yield the recorded runs, oldest first. Malformed lines are skipped."""
        if not self.path.exists():
            return
        try:
            with self.path.open(encoding="utf-8") as fh:
                for line in fh:
                    record = HistoryRecord.parse(line)
                    if record is not None:
                        yield record
        except (OSError, UnicodeDecodeError) as exc:
            raise HistoryError(f"Unable to read history file: {self.path}", cause=exc) from exc

    def names(self) -> set[str]:
        """Recorded run names, in pod-name form."""
        return {normalize_run_name(r.run_name) for r in self.records()}

    def exists(self, name: str) -> bool:
        return normalize_run_name(name) in self.names()

    def generate_next_name(self) -> str:
        """Mint a random name whose pod-name form is not yet recorded.

        After ``MAX_NAME_ATTEMPTS`` collisions a short hex suffix is appended.
        """
        if not self.enabled:
            raise HistoryError("Run history is disabled -- cannot generate a run name")
        used = self.names()
        for _ in range(MAX_NAME_ATTEMPTS):
            name = random_run_name(self._rng)
            if normalize_run_name(name) not in used:
                return name
        name = f"{random_run_name(self._rng)}_{uuid.uuid4().hex[:6]}"
        logger.debug("history.name_suffixed", run_name=name, used=len(used))
        return name

    def record(
        self,
        run_name: str,
        command: str,
        *,
        status: str = "-",
        session_id: str | None = None,
    ) -> HistoryRecord | None:
        """Append a run to the history file; no-op when disabled."""
        if not self.enabled:
            return None
        entry = HistoryRecord(
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            duration="-",
            run_name=run_name,
            status=status,
            revision_id="-",
            session_id=session_id or str(uuid.uuid4()),
            command=command,
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(entry.to_line())
        except OSError as exc:
            raise HistoryError(f"Unable to write history file: {self.path}", cause=exc) from exc
        logger.debug("history.recorded", run_name=run_name, status=status)
        return entry
