"""User-facing probe notification texts in the supported locales."""

from __future__ import annotations

from typing import Any, Dict

from provider_probe.constants import DEFAULT_LOCALE

_CATALOG: Dict[str, Dict[str, str]] = {
    "en": {
        "stream_check.operational": "{name} is operational ({time}ms)",
        "stream_check.degraded": "{name} is responding slowly ({time}ms)",
        "stream_check.failed": "{name} check failed: {error}",
        "stream_check.error": "{name} check errored: {error}",
        "stream_check.failed_hint": (
            "Probe results are for reference only. Some providers may not support "
            "this probing method; verify manually before relying on it."
        ),
    },
    "zh": {
        "stream_check.operational": "{name} 运行正常 ({time}ms)",
        "stream_check.degraded": "{name} 响应较慢 ({time}ms)",
        "stream_check.failed": "{name} 检查失败: {error}",
        "stream_check.error": "{name} 检查出错: {error}",
        "stream_check.failed_hint": (
            "检测结果仅供参考，部分供应商可能不支持此检测方式，建议手动测试确认。"
        ),
    },
}

SUPPORTED_LOCALES = tuple(_CATALOG)


def translate(key: str, locale: str = DEFAULT_LOCALE, **params: Any) -> str:
    """Render message *key* in *locale*, falling back to English.

    Raises ``KeyError`` for a key missing from the English catalogue.
    """
    table = _CATALOG.get(locale.lower(), _CATALOG[DEFAULT_LOCALE])
    template = table.get(key) or _CATALOG[DEFAULT_LOCALE][key]
    return template.format(**params)
