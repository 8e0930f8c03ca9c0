"""请求参数解析：作业名/作业 URL 提取与 ``name:value,...`` 形式的当前值解析。"""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

_PAIR_PATTERN = re.compile(r"^([^:]+):(.*)$", re.DOTALL)
_PARAMETER_NAME_PATTERN = re.compile(r"^[\w-]+$")
_JOB_SEGMENT_PATTERN = re.compile(r"^[\w.\- ]+$")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def split_respecting_brackets(text: str) -> list[str]:
    """按逗号切分，方括号内的逗号不作为分隔符。"""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            chunk = "".join(current).strip()
            if chunk:
                parts.append(chunk)
            current = []
            continue
        current.append(char)
    chunk = "".join(current).strip()
    if chunk:
        parts.append(chunk)
    return parts


def is_valid_parameter_name(name: str, max_length: int = 255) -> bool:
    stripped = name.strip()
    return bool(stripped) and len(stripped) <= max_length and bool(_PARAMETER_NAME_PATTERN.match(stripped))


def parse_parameter_values(
    params: str | None,
    *,
    max_name_length: int = 255,
    max_value_length: int = 4000,
) -> dict[str, str]:
    """解析 ``name:value,name:[v1,v2]`` 为有序映射；非法参数名被忽略，超长取值抛 ValueError。"""
    values: dict[str, str] = {}
    if not params or not params.strip():
        return values
    for pair in split_respecting_brackets(params):
        matched = _PAIR_PATTERN.match(pair)
        if matched is None:
            continue
        key = matched.group(1).strip()
        value = matched.group(2).strip()
        if len(value) >= 2 and value.startswith("[") and value.endswith("]"):
            value = value[1:-1]
        if not is_valid_parameter_name(key, max_name_length):
            continue
        if len(value) > max_value_length:
            raise ValueError(f"value of parameter {key} exceeds {max_value_length} characters")
        values[key] = value
    return values


def extract_job_name(job: str | None) -> str | None:
    """从作业全名或作业 URL 中提取全名；格式非法时返回 None。

    支持 ``folder/deploy``、``job/folder/job/deploy/`` 与
    ``https://ci.example.com/job/folder/job/deploy/`` 三种写法。
    """
    if job is None:
        return None
    text = job.strip()
    if not text:
        return None
    if "://" in text:
        text = urlsplit(text).path
    text = text.strip("/")
    if text.startswith("job/") or "/job/" in text:
        segments = f"/{text}".split("/job/")[1:]
    else:
        segments = text.split("/")
    segments = [unquote(item).strip("/") for item in segments]
    if not segments or any(not item for item in segments):
        return None
    # URL 形式中每段本身不应再包含 "/"。
    flat: list[str] = []
    for item in segments:
        flat.extend(item.split("/"))
    if not all(_JOB_SEGMENT_PATTERN.match(item) and item not in {".", ".."} for item in flat):
        return None
    return "/".join(flat)


def sanitize_message(text: str | None) -> str | None:
    """去掉换行与控制字符，避免错误信息污染响应或日志。"""
    if text is None:
        return None
    return _CONTROL_CHARS.sub("", re.sub(r"[\r\n\t]", " ", text)).strip()
