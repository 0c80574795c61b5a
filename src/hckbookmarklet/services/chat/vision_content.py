# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the vision content unit so this responsibility stays isolated, testable, and easy to evolve.

The bookmarklet embeds question images as ``[IMAGEM]: <url>`` lines inside
plain text. Vision-capable models expect OpenAI-style multi-part content
instead, so these helpers split such text into one text part followed by
one ``image_url`` part per marker.
"""

from __future__ import annotations

import re

from hckbookmarklet.models.chat import ImagePart, ImageUrl, TextPart

IMAGE_MARKER = "[IMAGEM]:"

_IMAGE_PATTERN = re.compile(r"\[IMAGEM\]:\s*(https?://\S+)", re.IGNORECASE)


def has_image_marker(content: str) -> bool:
    """Return whether ``content`` contains the literal image marker."""
    return IMAGE_MARKER in content


def extract_images(content: str) -> list[str]:
    """Return every marked image URL in order of occurrence."""
    return _IMAGE_PATTERN.findall(content)


def format_content_for_vision(content: str) -> list[TextPart | ImagePart]:
    """Split marked text into content parts.

    All remaining text comes first as a single part, followed by the images.
    Text that sat between two markers is therefore merged and moved ahead of
    every image.
    """
    images = extract_images(content)
    text_content = _IMAGE_PATTERN.sub("", content).strip()

    parts: list[TextPart | ImagePart] = []
    if text_content:
        parts.append(TextPart(text=text_content))
    for url in images:
        parts.append(ImagePart(image_url=ImageUrl(url=url)))
    return parts
