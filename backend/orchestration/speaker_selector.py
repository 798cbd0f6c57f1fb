"""
Next-speaker selection for multi-party conversations.

Two participants simply alternate. With three or more, the decision model is
asked who should speak next; any failure falls back to a random pick that
never repeats the current speaker.
"""

import logging
import random
from typing import Optional, Sequence

from domain.interfaces import CompletionBackend
from schemas import Participant, SessionConfig
from services.prompt_builder import build_decision_request

logger = logging.getLogger("SpeakerSelector")


def pick_random_participant(
    participants: Sequence[Participant], exclude_id: Optional[str] = None, rng: Optional[random.Random] = None
) -> Participant:
    """
    Pick a participant uniformly at random, excluding `exclude_id` when possible.

    Raises:
        ValueError: If participants is empty
    """
    if not participants:
        raise ValueError("cannot pick from an empty participant list")
    rng = rng or random
    options = [p for p in participants if p.id != exclude_id]
    if not options:
        return participants[0]
    return rng.choice(options)


def parse_speaker_choice(raw: str, participants: Sequence[Participant]) -> Optional[Participant]:
    """
    Match a "<name>|<reason>" reply against participant display names.

    Only the segment before the first pipe is used; matching is exact after
    trimming and case-folding.
    """
    candidate = (raw or "").split("|", 1)[0].strip().lower()
    if not candidate:
        return None
    return next((p for p in participants if p.display_name.strip().lower() == candidate), None)


class SpeakerSelector:
    """Decides who speaks next."""

    def __init__(self, backend: CompletionBackend, rng: Optional[random.Random] = None):
        """
        Args:
            backend: Completion backend used for model-assisted selection
            rng: Random source for fallback picks (injectable for tests)
        """
        self.backend = backend
        self.rng = rng or random.Random()

    async def select_next(
        self,
        credential: str,
        config: SessionConfig,
        current_speaker: Participant,
        participants: Sequence[Participant],
        history: Sequence[str],
    ) -> Participant:
        """
        Choose the next speaker.

        Never raises for backend or parsing failures; those fall back to a
        random participant other than the current speaker.

        Args:
            credential: Credential for the completion backend
            config: Session configuration (decision model, conversation type)
            current_speaker: Participant who spoke last
            participants: All participants in the session
            history: Rolling "Name: text" history

        Returns:
            The participant who should speak next
        """
        if len(participants) == 2:
            return next((p for p in participants if p.id != current_speaker.id), current_speaker)

        try:
            request = build_decision_request(config, participants, history)
            response = await self.backend.create_completion(credential, request)
            raw = response.content if response else ""
            match = parse_speaker_choice(raw, participants)
            if match is not None:
                logger.debug(f"🎯 Decision model chose {match.display_name}")
                return match
            logger.info(f"🎲 No participant matched decision reply {raw[:80]!r}, picking randomly")
        except Exception as e:
            logger.warning(f"⚠️ Failed to determine next speaker: {e}")

        return pick_random_participant(participants, current_speaker.id, self.rng)
