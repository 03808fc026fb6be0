"""Color blending with configurable factors and operators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, Sequence

Color = tuple[float, float, float, float]
ColorFunc = Callable[[Sequence[float], Sequence[float]], Sequence[float]]


class BlendMode(IntEnum):
    ONE = 0
    ZERO = 1
    SRC_COLOR = 2
    SRC_ALPHA = 3
    DST_COLOR = 4
    DST_ALPHA = 5
    ONE_MINUS_SRC_COLOR = 6
    ONE_MINUS_SRC_ALPHA = 7
    ONE_MINUS_DST_COLOR = 8
    ONE_MINUS_DST_ALPHA = 9
    SRC_ALPHA_SATURATE = 10


class BlendOp(IntEnum):
    ADD = 0
    SUBTRACT = 1
    REVERSE_SUBTRACT = 2
    MIN = 3
    MAX = 4


def _binary(op: BlendOp, a: float, b: float) -> float:
    if op is BlendOp.SUBTRACT:
        return a - b
    if op is BlendOp.MIN:
        return min(a, b)
    if op is BlendOp.MAX:
        return max(a, b)
    # ADD, and also REVERSE_SUBTRACT, which the pipeline treats as addition
    return a + b


def _rgb_factor(mode: BlendMode, src: Sequence[float], dst: Sequence[float]) -> tuple:
    if mode is BlendMode.ZERO:
        return (0.0, 0.0, 0.0)
    if mode is BlendMode.SRC_COLOR:
        return tuple(src[:3])
    if mode is BlendMode.SRC_ALPHA:
        return (src[3],) * 3
    if mode is BlendMode.DST_COLOR:
        return tuple(dst[:3])
    if mode is BlendMode.DST_ALPHA:
        return (dst[3],) * 3
    if mode is BlendMode.ONE_MINUS_SRC_COLOR:
        return tuple(1.0 - c for c in src[:3])
    if mode is BlendMode.ONE_MINUS_SRC_ALPHA:
        return (1.0 - src[3],) * 3
    if mode is BlendMode.ONE_MINUS_DST_COLOR:
        return tuple(1.0 - c for c in dst[:3])
    if mode is BlendMode.ONE_MINUS_DST_ALPHA:
        return (1.0 - dst[3],) * 3
    if mode is BlendMode.SRC_ALPHA_SATURATE:
        return (min(src[3], 1.0 - dst[3]),) * 3
    return (1.0, 1.0, 1.0)


def _alpha_factor(mode: BlendMode, src: Sequence[float], dst: Sequence[float]) -> float:
    if mode is BlendMode.ZERO:
        return 0.0
    if mode in (BlendMode.SRC_ALPHA, BlendMode.SRC_COLOR):
        return src[3]
    if mode in (BlendMode.DST_ALPHA, BlendMode.DST_COLOR):
        return dst[3]
    if mode in (BlendMode.ONE_MINUS_SRC_ALPHA, BlendMode.ONE_MINUS_SRC_COLOR):
        return 1.0 - src[3]
    if mode in (BlendMode.ONE_MINUS_DST_ALPHA, BlendMode.ONE_MINUS_DST_COLOR):
        return 1.0 - dst[3]
    return 1.0


@dataclass
class Blender:
    """Blends a source color into a destination color.

    Colors are (r, g, b, a) sequences. The optional callables override the
    operator and the factors computed from the modes.
    """

    color_op: BlendOp = BlendOp.ADD
    src_color_mode: BlendMode = BlendMode.SRC_ALPHA
    dst_color_mode: BlendMode = BlendMode.ONE_MINUS_SRC_ALPHA
    alpha_op: BlendOp = BlendOp.ADD
    src_alpha_mode: BlendMode = BlendMode.SRC_ALPHA
    dst_alpha_mode: BlendMode = BlendMode.ONE_MINUS_SRC_ALPHA
    blend_op: Optional[ColorFunc] = None
    src_blend_factor: Optional[ColorFunc] = None
    dst_blend_factor: Optional[ColorFunc] = None

    def set_color_blend_mode(self, src_mode: BlendMode, dst_mode: BlendMode) -> None:
        self.src_color_mode = src_mode
        self.dst_color_mode = dst_mode

    def set_alpha_blend_mode(self, src_mode: BlendMode, dst_mode: BlendMode) -> None:
        self.src_alpha_mode = src_mode
        self.dst_alpha_mode = dst_mode

    def blend(self, src: Sequence[float], dst: Sequence[float]) -> Color:
        sf = self.src_factor(src, dst)
        df = self.dst_factor(src, dst)
        return self.apply_blend_op(
            tuple(f * c for f, c in zip(sf, src)),
            tuple(f * c for f, c in zip(df, dst)),
        )

    def apply_blend_op(self, src: Sequence[float], dst: Sequence[float]) -> Color:
        if self.blend_op is not None:
            return tuple(self.blend_op(src, dst))
        rgb = tuple(_binary(self.color_op, a, b) for a, b in zip(src[:3], dst[:3]))
        return (*rgb, _binary(self.alpha_op, src[3], dst[3]))

    def src_factor(self, src: Sequence[float], dst: Sequence[float]) -> Color:
        if self.src_blend_factor is not None:
            return tuple(self.src_blend_factor(src, dst))
        return (
            *_rgb_factor(self.src_color_mode, src, dst),
            _alpha_factor(self.src_alpha_mode, src, dst),
        )

    def dst_factor(self, src: Sequence[float], dst: Sequence[float]) -> Color:
        if self.dst_blend_factor is not None:
            return tuple(self.dst_blend_factor(src, dst))
        return (
            *_rgb_factor(self.dst_color_mode, src, dst),
            _alpha_factor(self.dst_alpha_mode, src, dst),
        )