"""Codec that tunnels a whole serialized record through one JSON string."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import base58

from .. import errors
from ..types.node import NodeInfo
from . import Codec, _text


class NodeInfoCodec(Codec):
    """Writes a node info as the base-58 text of its serialized blob.

    The record's fields are never exposed to JSON, so its layout can change
    without affecting this form as long as the blob stays readable.
    """

    NAME = 'node_info'
    TYPE = NodeInfo
    ERROR = errors.InvalidRecord

    def dump(self, value: NodeInfo) -> str:
        return base58.b58encode(value.serialize()).decode('ascii')

    def load(self, obj: Any) -> NodeInfo:
        # accept the value still wrapped in its field, e.g. {"nodeInfo": "<b58>"}
        if isinstance(obj, Mapping) and len(obj) == 1:
            (obj,) = obj.values()
        return NodeInfo.deserialize(base58.b58decode(_text(obj)))
