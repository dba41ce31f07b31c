"""Fetch, render and send one digest cycle."""

import logging
from datetime import date
from typing import Callable, Optional

from affairs_digest.config import Config, get_config
from affairs_digest.digest.html import format_short_date, render_html_email

logger = logging.getLogger(__name__)


class DigestDispatcher:
    """Run one fetch -> render -> send cycle.

    Collaborators are created lazily from config unless injected, so a
    missing API key surfaces as a failed run rather than a startup crash.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        fetcher=None,
        delivery=None,
        renderer: Callable[[str, date], str] = render_html_email,
        clock: Callable[[], date] = date.today,
    ):
        self.config = config or get_config()
        self._fetcher = fetcher
        self._delivery = delivery
        self.renderer = renderer
        self.clock = clock

    @property
    def fetcher(self):
        if self._fetcher is None:
            from affairs_digest.content import ContentFetcher

            self._fetcher = ContentFetcher(self.config)
        return self._fetcher

    @property
    def delivery(self):
        if self._delivery is None:
            from affairs_digest.delivery import EmailDelivery

            self._delivery = EmailDelivery(self.config)
        return self._delivery

    def subject(self, today: date) -> str:
        return f"{self.config.email.subject_prefix} - {format_short_date(today)}"

    def run(self) -> bool:
        """Send today's digest.

        Returns:
            True if the email was handed to the relay, False otherwise
        """
        try:
            logger.info("Fetching government exam current affairs articles...")
            content = self.fetcher.fetch()

            if not content:
                logger.warning("No current affairs content was generated")
                return False

            today = self.clock()
            html_content = self.renderer(content, today)

            result = self.delivery.send(
                subject=self.subject(today),
                html_content=html_content,
                text_content=content,
            )
            if not result.success:
                logger.error(f"Digest delivery failed: {result.error}")
            return result.success

        except Exception as e:
            logger.exception(f"Digest run failed: {e}")
            return False
