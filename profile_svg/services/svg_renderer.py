"""SVG rendering for the aggregated GitHub profile.

Every section is placed at a fixed offset on a 900x1800 canvas. Content that
does not fit its section overflows; nothing is reflowed.
"""

import html
from collections.abc import Sequence

from profile_svg.api.schemas.profile import ContactEntry
from profile_svg.api.schemas.profile import RenderModel
from profile_svg.api.schemas.profile import SkillCategory


WIDTH = 900
HEIGHT = 1800
CONTENT_WIDTH = 828
FONT_FAMILY = "Segoe UI, Ubuntu, Sans-Serif"

CARD_FILL = "rgba(15,23,42,0.65)"
STAT_CARD_FILL = "rgba(15,23,42,0.68)"
CARD_STROKE = "rgba(148,163,184,0.35)"
HEADING_COLOR = "#FACC15"
TEXT_COLOR = "#E5E7EB"
MUTED_COLOR = "#94A3B8"
EMPTY_COLOR = "#64748B"
VALUE_COLOR = "#F8FAFC"

LANGUAGE_ROW_HEIGHT = 24
LANGUAGE_BAR_X = 110
LANGUAGE_BAR_MAX_WIDTH = 200
LANGUAGE_BAR_MIN_WIDTH = 2
ACTIVITY_ROW_HEIGHT = 20
LIST_ROW_HEIGHT = 18
SKILL_SECTION_HEIGHT = 66
SKILL_CHIP_PITCH = 140
SKILL_CHIP_WIDTH = 100
CONTACT_CARD_WIDTH = 188
CONTACT_CARD_GAP = 22

DEFAULT_ERROR_MESSAGE = "Unexpected error"


def escape_xml(value: object) -> str:
    """Escape the five XML special characters in `value`."""

    return html.escape(str(value), quote=True)


def format_number(value: float) -> str:
    """Format a coordinate without a trailing `.0` for whole numbers."""

    rounded = round(float(value), 2)
    if rounded.is_integer():
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0")


def text_element(
    x: float,
    y: float,
    content: object,
    fill: str = TEXT_COLOR,
    font_size: int = 12,
    font_weight: str | None = None,
    text_anchor: str | None = None,
    extra: str = "",
) -> str:
    attributes = [
        f'x="{format_number(x)}"',
        f'y="{format_number(y)}"',
        f'fill="{fill}"',
        f'font-size="{font_size}"',
        f'font-family="{FONT_FAMILY}"',
    ]
    if font_weight:
        attributes.append(f'font-weight="{font_weight}"')
    if text_anchor:
        attributes.append(f'text-anchor="{text_anchor}"')
    if extra:
        attributes.append(extra)
    return f"<text {' '.join(attributes)}>{escape_xml(content)}</text>"


def card_rect(width: int, height: int, fill: str = CARD_FILL) -> str:
    return (
        f'<rect width="{width}" height="{height}" rx="20" '
        f'fill="{fill}" stroke="{CARD_STROKE}"/>'
    )


def section_title(title: str, y: int = 38) -> str:
    return text_element(
        20, y, title, fill=HEADING_COLOR, font_size=18, font_weight="700"
    )


def render_bullet_list(items: Sequence[str], empty_message: str) -> str:
    if not items:
        return text_element(20, 115, empty_message, fill=EMPTY_COLOR)
    return "".join(
        text_element(20, 115 + index * LIST_ROW_HEIGHT, f"• {item}")
        for index, item in enumerate(items)
    )


def render_header(model: RenderModel) -> str:
    return "".join(
        [
            text_element(
                32,
                56,
                f"👋 Hi, I'm {model.profile.display_name}",
                fill=VALUE_COLOR,
                font_size=28,
                font_weight="700",
            ),
            text_element(32, 84, model.profile.bio, fill="#A5B4FC", font_size=14),
        ]
    )


def render_about(paragraphs: Sequence[str]) -> str:
    body = "".join(f"<p>{escape_xml(paragraph)}</p>" for paragraph in paragraphs)
    return (
        '<g transform="translate(32, 110)">'
        f"{card_rect(CONTENT_WIDTH, 280)}"
        f"{section_title('About Me', y=40)}"
        '<foreignObject x="20" y="50" width="780" height="220">'
        '<div xmlns="http://www.w3.org/1999/xhtml" style="color:#CBD5F5;'
        "font-size:13px;font-family:'Segoe UI', Ubuntu, Sans-Serif;"
        'line-height:1.5;">'
        f"{body}"
        "</div>"
        "</foreignObject>"
        "</g>"
    )


def render_stat_card(
    x: int, title: str, accent: str, value: object, body: str
) -> str:
    return (
        f'<g transform="translate({x}, 402)">'
        f"{card_rect(260, 205, fill=STAT_CARD_FILL)}"
        f"{text_element(20, 38, title, fill=accent, font_size=14)}"
        f"{text_element(20, 68, value, fill=VALUE_COLOR, font_size=26, font_weight='700')}"
        f"{body}"
        "</g>"
    )


def recent_heading() -> str:
    return text_element(20, 95, "Recent 5:", fill=MUTED_COLOR, font_weight="600")


def render_stat_cards(model: RenderModel) -> str:
    followers = render_stat_card(
        32,
        "Followers",
        "#38BDF8",
        model.profile.follower_count,
        recent_heading()
        + render_bullet_list(model.recent_followers, "No recent followers"),
    )
    public_repos = render_stat_card(
        316,
        "Public Repositories",
        "#34D399",
        model.public_repo_count,
        recent_heading()
        + render_bullet_list(model.recent_public_repos, "No public repos"),
    )

    if model.private_repo_count is None or model.recent_private_repos is None:
        private_value: object = "—"
        private_body = text_element(
            20, 86, "Requires authenticated profile", fill=MUTED_COLOR, font_size=11
        )
    else:
        private_value = model.private_repo_count
        private_body = recent_heading() + render_bullet_list(
            model.recent_private_repos, "No private repos"
        )
    private_repos = render_stat_card(
        600, "Private Repositories", "#F97316", private_value, private_body
    )

    return followers + public_repos + private_repos


def render_languages(model: RenderModel) -> str:
    rows = []
    for index, share in enumerate(model.languages):
        bar_width = max(
            LANGUAGE_BAR_MIN_WIDTH,
            share.percentage / 100 * LANGUAGE_BAR_MAX_WIDTH,
        )
        rows.append(
            f'<g transform="translate(0, {index * LANGUAGE_ROW_HEIGHT})">'
            f"{text_element(0, 14, share.name)}"
            f'<rect x="{LANGUAGE_BAR_X}" y="4" width="{format_number(bar_width)}" '
            'height="10" rx="5" fill="#38BDF8"/>'
            f"{text_element(LANGUAGE_BAR_X + bar_width + 8, 14, f'{share.percentage:.1f}%', fill=MUTED_COLOR)}"
            "</g>"
        )
    body = "".join(rows) or text_element(20, 20, "No language data", fill=MUTED_COLOR)

    return (
        '<g transform="translate(32, 620)">'
        f"{card_rect(CONTENT_WIDTH, 150)}"
        f"{section_title('Top Languages', y=40)}"
        f'<g transform="translate(16, 60)">{body}</g>'
        "</g>"
    )


def render_contributions(model: RenderModel) -> str:
    summary = model.contributions
    cards = [
        (27, "Total Contributions", "#38BDF8", summary.total),
        (294, "Active Days", "#34D399", summary.active_days),
        (561, "Current Streak", "#F97316", f"{summary.current_streak} days"),
    ]
    body = "".join(
        f'<g transform="translate({x}, 60)">'
        f"{card_rect(240, 96, fill=STAT_CARD_FILL)}"
        f"{text_element(20, 38, title, fill=accent, font_size=14)}"
        f"{text_element(20, 68, value, fill=VALUE_COLOR, font_size=26, font_weight='700')}"
        "</g>"
        for x, title, accent, value in cards
    )
    return (
        '<g transform="translate(32, 783)">'
        f"{card_rect(CONTENT_WIDTH, 190)}"
        f"{section_title('Contribution Overview')}"
        f"{body}"
        "</g>"
    )


def render_activity(model: RenderModel) -> str:
    rows = "".join(
        f'<g transform="translate(0, {index * ACTIVITY_ROW_HEIGHT})">'
        f"{text_element(40, 10, event.repo_name)}"
        f"{text_element(410, 10, event.event_type, fill='#A5B4FC')}"
        f"{text_element(780, 10, event.date, fill=MUTED_COLOR, text_anchor='end')}"
        "</g>"
        for index, event in enumerate(model.activity)
    )
    body = rows or text_element(40, 16, "No recent events", fill=MUTED_COLOR)

    return (
        '<g transform="translate(32, 987)">'
        f"{card_rect(CONTENT_WIDTH, 200)}"
        f"{section_title('Recent Activity')}"
        f"{text_element(40, 70, 'Repository', fill=MUTED_COLOR)}"
        f"{text_element(420, 70, 'Event', fill=MUTED_COLOR)}"
        f"{text_element(760, 70, 'Date', fill=MUTED_COLOR, text_anchor='end')}"
        f'<g transform="translate(0, 86)">{body}</g>'
        "</g>"
    )


def render_skill_category(index: int, category: SkillCategory) -> str:
    chips = "".join(
        f'<rect x="{item_index * SKILL_CHIP_PITCH}" y="28" width="{SKILL_CHIP_WIDTH}" '
        f'height="24" rx="12" fill="{CARD_FILL}" stroke="{CARD_STROKE}"/>'
        + text_element(
            item_index * SKILL_CHIP_PITCH + SKILL_CHIP_WIDTH / 2,
            40,
            item,
            text_anchor="middle",
            extra='dominant-baseline="middle"',
        )
        for item_index, item in enumerate(category.items)
    )
    return (
        f'<g transform="translate(0, {index * SKILL_SECTION_HEIGHT})">'
        f"{text_element(0, 16, category.title, fill=HEADING_COLOR, font_size=13, font_weight='600')}"
        f"{chips}"
        "</g>"
    )


def render_skills(skills: Sequence[SkillCategory]) -> str:
    blocks = "".join(
        render_skill_category(index, category) for index, category in enumerate(skills)
    )
    return (
        '<g transform="translate(32, 1200)">'
        f"{card_rect(CONTENT_WIDTH, 400)}"
        f"{section_title('Technical Skills')}"
        f'<g transform="translate(20, 60)">{blocks}</g>'
        "</g>"
    )


def contact_offset(count: int) -> float:
    """Left offset that centers `count` contact cards in the content width."""

    section_width = count * CONTACT_CARD_WIDTH + max(0, count - 1) * CONTACT_CARD_GAP
    return max(0, (CONTENT_WIDTH - section_width) / 2)


def render_contacts(contacts: Sequence[ContactEntry]) -> str:
    offset = contact_offset(len(contacts))
    no_pointer = 'style="pointer-events: none;"'
    cards = "".join(
        f'<g transform="translate('
        f'{format_number(offset + index * (CONTACT_CARD_WIDTH + CONTACT_CARD_GAP))}, 0)" '
        f"{no_pointer}>"
        f'<rect width="{CONTACT_CARD_WIDTH}" height="70" rx="18" '
        f'fill="{CARD_FILL}" stroke="{CARD_STROKE}"/>'
        f"{text_element(20, 32, contact.label, fill=VALUE_COLOR, font_size=14, font_weight='600', extra=no_pointer)}"
        f"{text_element(20, 52, contact.value, fill=MUTED_COLOR, extra=no_pointer)}"
        "</g>"
        for index, contact in enumerate(contacts)
    )
    return (
        '<g transform="translate(32, 1610)">'
        f"{card_rect(CONTENT_WIDTH, 160)}"
        f"{section_title('Connect With Me')}"
        f'<g transform="translate(0, 60)">{cards}</g>'
        "</g>"
    )


def render_svg(model: RenderModel) -> str:
    """Render the full profile document. Same model, same bytes."""

    title = f"{model.profile.display_name} • GitHub Overview"
    sections = [
        render_header(model),
        render_about(model.content.about),
        render_stat_cards(model),
        render_languages(model),
        render_contributions(model),
        render_activity(model),
        render_skills(model.content.skills),
        render_contacts(model.content.contacts),
    ]

    return (
        f'<svg width="{WIDTH}" height="{HEIGHT}" viewBox="0 0 {WIDTH} {HEIGHT}" '
        'fill="none" xmlns="http://www.w3.org/2000/svg" role="img" '
        'aria-labelledby="title">\n'
        f'<title id="title">{escape_xml(title)}</title>\n'
        "<defs>"
        f'<linearGradient id="bg" x1="0" y1="0" x2="{WIDTH}" y2="{HEIGHT}" '
        'gradientUnits="userSpaceOnUse">'
        '<stop stop-color="#0F172A"/>'
        '<stop offset="1" stop-color="#111827"/>'
        "</linearGradient>"
        "</defs>\n"
        f'<rect x="0.5" y="0.5" width="{WIDTH - 1}" height="{HEIGHT - 1}" rx="28" '
        'fill="url(#bg)" stroke="#1F2937"/>\n'
        + "\n".join(sections)
        + "\n</svg>\n"
    )


def render_error_svg(message: str | None) -> str:
    """Small fallback image shown when the profile cannot be rendered."""

    return (
        '<svg width="600" height="140" xmlns="http://www.w3.org/2000/svg">'
        '<rect width="600" height="140" rx="16" fill="#111827"/>'
        f"{text_element(24, 64, 'Unable to generate SVG.', fill='#F87171', font_size=16)}"
        f"{text_element(24, 92, message or DEFAULT_ERROR_MESSAGE, fill='#F87171')}"
        "</svg>\n"
    )
