"""Built-in engine kinds that GDScript can extend directly."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

ENGINE_NAMESPACE = "Godot"
UNIVERSAL_ROOT = "GodotObject"
PROXY_SUFFIX = "Proxy"


class NativeKind(Enum):
    """Closed set of engine classes recognised by the parser as native bases.

    Each member carries the GDScript spelling and the C# type name the engine
    assembly exposes. Only ``Object`` is renamed on the C# side.
    """

    OBJECT = ("Object", "GodotObject")
    REF_COUNTED = ("RefCounted", "RefCounted")
    RESOURCE = ("Resource", "Resource")
    NODE = ("Node", "Node")
    CANVAS_ITEM = ("CanvasItem", "CanvasItem")
    NODE_2D = ("Node2D", "Node2D")
    NODE_3D = ("Node3D", "Node3D")
    CONTROL = ("Control", "Control")
    CONTAINER = ("Container", "Container")
    PANEL = ("Panel", "Panel")
    LABEL = ("Label", "Label")
    BUTTON = ("Button", "Button")
    CANVAS_LAYER = ("CanvasLayer", "CanvasLayer")
    SPRITE_2D = ("Sprite2D", "Sprite2D")
    SPRITE_3D = ("Sprite3D", "Sprite3D")
    ANIMATED_SPRITE_2D = ("AnimatedSprite2D", "AnimatedSprite2D")
    CAMERA_2D = ("Camera2D", "Camera2D")
    CAMERA_3D = ("Camera3D", "Camera3D")
    AREA_2D = ("Area2D", "Area2D")
    AREA_3D = ("Area3D", "Area3D")
    CHARACTER_BODY_2D = ("CharacterBody2D", "CharacterBody2D")
    CHARACTER_BODY_3D = ("CharacterBody3D", "CharacterBody3D")
    RIGID_BODY_2D = ("RigidBody2D", "RigidBody2D")
    RIGID_BODY_3D = ("RigidBody3D", "RigidBody3D")
    STATIC_BODY_2D = ("StaticBody2D", "StaticBody2D")
    STATIC_BODY_3D = ("StaticBody3D", "StaticBody3D")
    MESH_INSTANCE_3D = ("MeshInstance3D", "MeshInstance3D")
    TIMER = ("Timer", "Timer")
    ANIMATION_PLAYER = ("AnimationPlayer", "AnimationPlayer")
    AUDIO_STREAM_PLAYER = ("AudioStreamPlayer", "AudioStreamPlayer")
    TILE_MAP = ("TileMap", "TileMap")

    def __init__(self, script_name: str, native_name: str) -> None:
        self.script_name = script_name
        self.native_name = native_name

    @property
    def proxy_name(self) -> str:
        return proxy_name_for(self.native_name)

    @classmethod
    def from_script_name(cls, name: str) -> Optional["NativeKind"]:
        return _BY_SCRIPT_NAME.get(name)

    @classmethod
    def from_native_name(cls, name: str) -> Optional["NativeKind"]:
        return _BY_NATIVE_NAME.get(name)


_BY_SCRIPT_NAME: Dict[str, NativeKind] = {kind.script_name: kind for kind in NativeKind}
_BY_NATIVE_NAME: Dict[str, NativeKind] = {kind.native_name: kind for kind in NativeKind}


def proxy_name_for(native_name: str) -> str:
    """Return the generated proxy type name for a native type."""
    return f"{native_name}{PROXY_SUFFIX}"


def native_name_for_script(name: str) -> str:
    """Translate a GDScript engine class spelling into its C# type name."""
    kind = NativeKind.from_script_name(name)
    return kind.native_name if kind else name


__all__ = [
    "ENGINE_NAMESPACE",
    "NativeKind",
    "PROXY_SUFFIX",
    "UNIVERSAL_ROOT",
    "native_name_for_script",
    "proxy_name_for",
]
