"""Text and HTML rendering of the LoopCard views."""

import html
from string import Template

from loopcard import APP_NAME, PUBLIC_URL_BASE
from loopcard.dashboard import Dashboard
from loopcard.editor import SETTINGS_FIELDS, SettingsEditor
from loopcard.image_utils import decode_data_url
from loopcard.qr_generator import QRStatus, build_public_url, generate_qr_code, qr_to_data_url
from loopcard.record import ProfileRecord
from loopcard.state import NAV_ROUTES, PUBLIC_BLOCKED_NOTICE, Route
from loopcard.validators import is_complete, whatsapp_digits
from loopcard.wizard import IntakeWizard

RULE = "=" * 50
FOOTER = "Built with ❤️ — Local-first. No server required."
PUBLIC_FOOTER = f"{APP_NAME} · Local Preview"


def contact_actions(record: ProfileRecord) -> list[tuple[str, str]]:
    """``(label, href)`` pairs for the public card's contact buttons."""
    actions = [
        ("Call", f"tel:{record.phone}"),
        ("WhatsApp", f"https://wa.me/{whatsapp_digits(record.whatsapp)}"),
        ("Email", f"mailto:{record.email}"),
    ]
    if record.website:
        actions.append(("Website", record.website))
    return actions


def _swatch(color: str) -> str:
    """24-bit ANSI colour block."""
    r, g, b = (int(color[i:i + 2], 16) for i in (1, 3, 5))
    return f"\033[48;2;{r};{g};{b}m    \033[0m"


def render_header(route: Route, theme_color: str, color: bool = True) -> str:
    swatch = _swatch(theme_color) + " " if color else ""
    nav = "  ".join(
        f"[{r.value.title()}]" if r is route else f" {r.value.title()} "
        for r in NAV_ROUTES
    )
    return f"{swatch}{APP_NAME}    {nav}\n{RULE}"


def render_footer() -> str:
    return f"{RULE}\n{FOOTER}"


def render_wizard(wizard: IntakeWizard, base_url: str = PUBLIC_URL_BASE) -> str:
    step = wizard.current
    record = wizard.state.record
    lines = [f"Setup Wizard — step {step.number}/4: {step.title}", ""]
    for i, form_field in enumerate(step.fields, start=1):
        marker = " *" if form_field.required else ""
        if form_field.name == "avatar_image":
            value = "(image set)" if record.avatar_image else "No image"
        else:
            value = getattr(record, form_field.name) or f"<{form_field.placeholder}>"
        lines.append(f"  {i}. {form_field.label}{marker}: {value}")
    if step.number == 1:
        lines.append("")
        lines.append(f"  Your public URL will be {build_public_url(record.slug, base_url)}")
    lines.append("")
    if step.number < 4:
        state = "" if wizard.can_continue() else " (disabled)"
        lines.append(f"  [n] Continue{state}")
    else:
        state = "" if wizard.can_finish() else " (disabled)"
        lines.append(f"  [f] Finish{state}")
    if step.number > 1:
        lines.append("  [b] Back")
    return "\n".join(lines)


def render_dashboard(dashboard: Dashboard) -> str:
    lines = ["Your Card Summary"]
    lines.extend(f"  {label + ':':<10} {value}" for label, value in dashboard.summary())
    if dashboard.notice:
        lines.append(f"  ! {dashboard.notice}")
    lines.append("")
    lines.append("QR Code")
    lines.append(f"  Scan to open: {dashboard.public_url}")

    status = dashboard.qr_status
    if status is QRStatus.GENERATING:
        lines.append("  Generating…")
    elif status is QRStatus.READY:
        lines.append("  QR ready")
    elif status is QRStatus.FAILED:
        lines.append(f"  QR generation failed: {dashboard.dispatcher.error}")
    else:
        lines.append("  No QR")

    open_state = "" if dashboard.can_open_public else " (disabled)"
    download_state = "" if status is QRStatus.READY else " (disabled)"
    lines.append("")
    lines.append(f"  [o] Open Public Card{open_state}   [e] Edit Settings")
    lines.append(f"  [w] Download PNG{download_state}   [c] Copy URL")
    if status is QRStatus.FAILED:
        lines.append("  [r] Retry QR")
    return "\n".join(lines)


def render_public_card(record: ProfileRecord, base_url: str = PUBLIC_URL_BASE) -> str:
    """Plain-text card, or the blocking notice if the record is incomplete."""
    if not is_complete(record):
        return PUBLIC_BLOCKED_NOTICE

    lines = [record.business_name, record.full_name]
    if record.avatar_image:
        lines.append("(avatar)")
    lines.append("")
    lines.append(record.bio)
    if record.address:
        lines.append(f"📍 {record.address}")
    lines.append("")
    lines.extend(f"  {label:<9} {href}" for label, href in contact_actions(record))
    lines.append("")
    lines.append(f"Public URL: {build_public_url(record.slug, base_url)}")
    lines.append(PUBLIC_FOOTER)
    return "\n".join(lines)


def render_settings(editor: SettingsEditor) -> str:
    staged = editor.staged
    lines = ["Settings", ""]
    lines.append(f"  c. Theme Color: {staged.theme_color}")
    lines.append(f"  s. Enable Sync (optional): {'Yes' if staged.sync_enabled else 'No'}")
    if editor.sync_notice:
        lines.append(f"     ! {editor.sync_notice}")
    lines.append("")
    lines.append("Edit Details")
    for i, form_field in enumerate(SETTINGS_FIELDS, start=1):
        marker = " *" if form_field.required else ""
        value = getattr(staged, form_field.name) or f"<{form_field.placeholder}>"
        lines.append(f"  {i}. {form_field.label}{marker}: {value}")
    lines.append(f"  a. Avatar: {'(image set)' if staged.avatar_image else 'No image'}")
    lines.append("")
    save_state = "" if editor.can_save() else " (disabled)"
    lines.append(f"  [w] Save Changes{save_state}   [x] Cancel")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# HTML card
# ---------------------------------------------------------------------------

_CARD_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>$title</title>
<style>
body{margin:0;background:#f8fafc;font-family:system-ui,sans-serif;color:#0f172a}
.card{max-width:28rem;margin:2rem auto;background:#fff;border:1px solid #e2e8f0;border-radius:1.5rem;overflow:hidden}
.band{height:7rem}
.head{display:flex;align-items:flex-end;gap:.75rem;margin-top:-2.5rem;padding:0 1rem}
.avatar{width:5rem;height:5rem;border-radius:50%;border:4px solid #fff;object-fit:cover}
h1{margin:0;font-size:1.25rem}
.who{margin:0;color:#475569;font-size:.875rem}
.body{padding:1rem}
.address{color:#64748b;font-size:.75rem}
.actions{display:grid;grid-template-columns:1fr 1fr;gap:.5rem}
.actions a{border:1px solid #e2e8f0;border-radius:1rem;padding:.75rem;text-align:center;font-weight:600;color:inherit;text-decoration:none}
.url{margin-top:.5rem;background:#f8fafc;border-radius:1rem;padding:.75rem;font-size:.75rem;color:#64748b}
.qr{margin-top:.75rem;text-align:center}
.qr img{width:10rem;height:10rem}
footer{border-top:1px solid #e2e8f0;background:#f8fafc;padding:.75rem;text-align:center;font-size:.75rem;color:#64748b}
</style>
</head>
<body>
<div class="card">
<div class="band" style="background:$color"></div>
<div class="head">$avatar<div><h1>$business</h1><p class="who">$name</p></div></div>
<div class="body">
<p>$bio</p>
$address
<div class="actions">
$actions
</div>
<div class="url">Public URL: <code>$url</code></div>
<div class="qr"><img src="$qr" alt="QR code"></div>
</div>
<footer>$footer</footer>
</div>
</body>
</html>
""")


_EXTERNAL_TARGET = ' target="_blank" rel="noopener"'


def _avatar_src(record: ProfileRecord) -> str | None:
    """The avatar data URL if it is a well-formed inline image."""
    if not record.avatar_image:
        return None
    try:
        mime, _ = decode_data_url(record.avatar_image)
    except ValueError:
        return None
    return record.avatar_image if mime.startswith("image/") else None


def render_public_card_html(record: ProfileRecord, base_url: str = PUBLIC_URL_BASE) -> str:
    """Standalone HTML page for a complete record.

    Raises:
        ValueError: If the record is incomplete.
    """
    if not is_complete(record):
        raise ValueError(PUBLIC_BLOCKED_NOTICE)

    esc = html.escape
    avatar_src = _avatar_src(record)
    avatar = f'<img class="avatar" src="{esc(avatar_src)}" alt="avatar">' if avatar_src else ""
    address = f'<p class="address">📍 {esc(record.address)}</p>' if record.address else ""
    links = []
    for label, href in contact_actions(record):
        target = _EXTERNAL_TARGET if label in ("WhatsApp", "Website") else ""
        links.append(f'<a href="{esc(href)}"{target}>{esc(label)}</a>')
    actions = "\n".join(links)
    url = build_public_url(record.slug, base_url)
    return _CARD_TEMPLATE.substitute(
        title=esc(f"{record.business_name} — {APP_NAME}"),
        color=esc(record.theme_color),
        avatar=avatar,
        business=esc(record.business_name),
        name=esc(record.full_name),
        bio=esc(record.bio),
        address=address,
        actions=actions,
        url=esc(url),
        qr=qr_to_data_url(generate_qr_code(url)),
        footer=esc(PUBLIC_FOOTER),
    )
