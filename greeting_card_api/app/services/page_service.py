"""
Content of the greeting page.

The page at ``/`` has two modes.  With an ``id`` query parameter it shows
the stored greeting: names, subtitle, quote, message and memory lines are
substituted into the display regions and the page title and share
metadata name the receiver.  Without an identifier, or when the greeting
cannot be loaded, it shows placeholder content and the creation form.

This module only computes values; escaping happens in the Jinja
template, which is rendered with autoescaping enabled, so user content
never becomes markup.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import quote

from greeting_card_api.app.schemas.greeting import GreetingRead


@dataclass(frozen=True)
class DayTheme:
    """Default content for one day of the greeting week."""

    name: str
    subtitle: str
    quote: str
    message: str
    memories: tuple = ()


DAY_THEMES: tuple = (
    DayTheme(
        "Rose Day",
        "A rose for every reason I smile",
        "Love is the flower you've got to let grow.",
        "Every petal is a small thank you for being you.",
        ("The first flower I gave you", "Petals on the windowsill"),
    ),
    DayTheme(
        "Propose Day",
        "A question I have always known the answer to",
        "I choose you, and I'll choose you over and over.",
        "Will you keep walking this road with me?",
    ),
    DayTheme(
        "Chocolate Day",
        "Sweeter than anything in the box",
        "All you need is love. But a little chocolate now and then doesn't hurt.",
        "Here is something sweet for someone sweeter.",
    ),
    DayTheme(
        "Teddy Day",
        "A hug you can keep",
        "Some people are worth melting for.",
        "For the nights I can't be there to hold you.",
    ),
    DayTheme(
        "Promise Day",
        "Words I mean to keep",
        "I promise to love you in every version of our story.",
        "Today I make you a promise, and every day I'll keep it.",
    ),
    DayTheme(
        "Hug Day",
        "Arms wide open",
        "A hug is a handshake from the heart.",
        "Consider this a hug sent across any distance.",
    ),
    DayTheme(
        "Kiss Day",
        "Sealed with a kiss",
        "A kiss is a secret told to the mouth instead of the ear.",
        "This one comes with a kiss on the cheek.",
    ),
    DayTheme(
        "Valentine's Day",
        "Forever starts today",
        "You are my today and all of my tomorrows.",
        "Happy Valentine's Day to the one who makes every day brighter.",
        ("Our first coffee", "The rainy walk home", "Every ordinary day with you"),
    ),
)

DEFAULT_RECEIVER = "My Valentine"
DEFAULT_SENDER = "Someone who loves you"
DEFAULT_TITLE = "A Valentine's Message 💕"
DEFAULT_DESCRIPTION = "Create a personalized Valentine's greeting and share it with a link."
SHARE_TEXT = "💕 I made something special for you!"


def day_theme(day_index: int) -> DayTheme:
    """Return the theme for ``day_index``, falling back to the first day."""
    if 0 <= day_index < len(DAY_THEMES):
        return DAY_THEMES[day_index]
    return DAY_THEMES[0]


@dataclass
class ShareLinks:
    """Social-share links for a greeting URL."""

    url: str
    whatsapp: str
    telegram: str
    facebook: str


@dataclass
class PageContext:
    """Values substituted into the page template."""

    title: str
    description: str
    receiver: str
    sender: str
    subtitle: str
    quote: str
    message: str
    memories: List[str] = field(default_factory=list)
    day: DayTheme = DAY_THEMES[0]
    show_form: bool = False
    greeting_id: Optional[str] = None
    form_error: Optional[str] = None
    form_values: dict = field(default_factory=dict)
    share: Optional[ShareLinks] = None

    @property
    def recipient_card(self) -> str:
        return f"— {self.receiver}"


class PageService:
    """Build ``PageContext`` objects for the greeting page."""

    @staticmethod
    def build_greeting_page(greeting: GreetingRead) -> PageContext:
        """Populate the page with a stored greeting.

        Empty optional fields keep the content of the greeting's day theme.
        """
        theme = day_theme(greeting.day_index)
        extras = greeting.extras
        return PageContext(
            title=f"A Valentine's Message for {greeting.receiver} 💕",
            description=f"{greeting.sender} has a special message for you...",
            receiver=greeting.receiver,
            sender=greeting.sender,
            subtitle=extras.subtitle or theme.subtitle,
            quote=extras.quote or theme.quote,
            message=greeting.message or theme.message,
            memories=list(extras.memories) or list(theme.memories),
            day=theme,
            greeting_id=greeting.id,
        )

    @staticmethod
    def build_default_page(
        day_index: int = 0,
        *,
        form_error: Optional[str] = None,
        form_values: Optional[dict] = None,
    ) -> PageContext:
        """Placeholder content with the creation form shown."""
        theme = day_theme(day_index)
        return PageContext(
            title=DEFAULT_TITLE,
            description=DEFAULT_DESCRIPTION,
            receiver=DEFAULT_RECEIVER,
            sender=DEFAULT_SENDER,
            subtitle=theme.subtitle,
            quote=theme.quote,
            message=theme.message,
            memories=list(theme.memories),
            day=theme,
            show_form=True,
            form_error=form_error,
            form_values=form_values or {},
        )

    @staticmethod
    def build_share_links(url: str) -> ShareLinks:
        """Return share links for WhatsApp, Telegram and Facebook."""
        encoded_url = quote(url, safe="")
        return ShareLinks(
            url=url,
            whatsapp=f"https://wa.me/?text={quote(f'{SHARE_TEXT} Check it out: {url}', safe='')}",
            telegram=f"https://t.me/share/url?url={encoded_url}&text={quote(SHARE_TEXT, safe='')}",
            facebook=f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}",
        )

    @classmethod
    def build_created_page(cls, url: str, day_index: int = 0) -> PageContext:
        """Default page with the share panel for a freshly created greeting."""
        context = cls.build_default_page(day_index)
        context.show_form = False
        context.share = cls.build_share_links(url)
        return context
