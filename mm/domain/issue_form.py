"""
Issue-form body parser.

GitHub issue forms render every field as a `### <Label>` heading followed by
the answer. Checkbox fields render as `- [X] <option>` lines, empty answers as
`_No response_`.
"""
from typing import Dict, List, Optional

from ..core.constants import RE_HEADING, RE_NON_ALNUM, RE_NO_RESPONSE, RE_CHECKBOX, RE_CHECKED
from ..core.models import FormField

def normalize_heading(text: str) -> str:
    """'Marker ID (optional)' -> 'marker_id_optional'"""
    s = (text or "").lower().strip()
    s = RE_NON_ALNUM.sub("_", s)
    return s.strip("_")

def clean_value(raw: str) -> str:
    if RE_NO_RESPONSE.fullmatch(raw.strip()):
        return ""
    return RE_CHECKBOX.sub("", raw).strip()

def _make_field(lines: List[str]) -> FormField:
    raw = "\n".join(lines).strip()
    return FormField(
        raw=raw,
        value=clean_value(raw),
        checked=bool(RE_CHECKED.search(raw)),
    )

def parse_issue_form(body: Optional[str]) -> Dict[str, FormField]:
    result: Dict[str, FormField] = {}
    if not body or not isinstance(body, str):
        return result

    lines = body.replace("\r\n", "\n").split("\n")

    # state: key is None -> outside any section
    key: Optional[str] = None
    buffer: List[str] = []

    for line in lines:
        m = RE_HEADING.match(line)
        if m:
            if key is not None:
                result[key] = _make_field(buffer)
            key = normalize_heading(m.group(1))
            buffer = []
            continue

        if line.strip() == "---":
            continue

        if key is not None:
            buffer.append(line)

    if key is not None:
        result[key] = _make_field(buffer)

    return result

def field_checked(form: Dict[str, FormField], *keys: str) -> bool:
    return any(form[k].checked for k in keys if k in form)
