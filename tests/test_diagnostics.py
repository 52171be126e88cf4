"""Tests for type descriptions and build failure reports."""

from __future__ import annotations

from typing import Annotated, Generic, TypeVar

import pytest

from solowire._internal.diagnostics import (
    describe_signature,
    describe_type,
    format_cycle_report,
    format_missing_report,
    sort_by_description,
)
from solowire.builder import ContainerBuilder
from solowire.exceptions import SoloWireDependencyCycleError, SoloWireDependencyMissingError
from solowire.markers import Component

T = TypeVar("T")


class Alpha:
    pass


class Beta:
    pass


class Outer:
    class Inner:
        pass


class Box(Generic[T]):
    def __init__(self, item: T) -> None:
        self.item = item


class Ping:
    def __init__(self, pong: Pong) -> None:
        self.pong = pong


class Pong:
    def __init__(self, ping: Ping) -> None:
        self.ping = ping


def make_box_of_alpha(alpha: Alpha) -> Box[Alpha]:
    return Box(alpha)


class TestDescribeType:
    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            (int, "builtins.int"),
            (Alpha, f"{__name__}.Alpha"),
            (Outer.Inner, f"{__name__}.Outer.Inner"),
            (Box[int], f"{__name__}.Box<builtins.int>"),
            (Box, f"{__name__}.Box<T>"),
            (list[Box[Beta]], f"builtins.list<{__name__}.Box<{__name__}.Beta>>"),
            (dict[str, int], "builtins.dict<builtins.str, builtins.int>"),
            (T, "T"),
        ],
    )
    def test_describe_type(self, key: object, expected: str) -> None:
        assert describe_type(key) == expected

    def test_describe_annotated_key(self) -> None:
        key = Annotated[Alpha, Component("primary")]

        assert describe_type(key) == f"{__name__}.Alpha[Component(value='primary')]"

    def test_describe_signature(self) -> None:
        assert describe_signature(Ping, [Pong]) == f"{__name__}.Ping({__name__}.Pong)"
        assert describe_signature(Alpha, []) == f"{__name__}.Alpha()"
        assert (
            describe_signature(Box[Alpha], [Alpha, int])
            == f"{__name__}.Box<{__name__}.Alpha>({__name__}.Alpha, builtins.int)"
        )

    def test_sort_by_description_uses_code_points(self) -> None:
        assert sort_by_description([str, int, bool]) == [bool, int, str]


class TestReports:
    def test_missing_report_without_incomplete_components(self) -> None:
        report = format_missing_report([Beta, Alpha], [])

        assert report == f"Missing:\n  {__name__}.Alpha\n  {__name__}.Beta"

    def test_missing_report_sorts_incomplete_lines(self) -> None:
        report = format_missing_report([Alpha], [(Pong, (Ping,)), (Ping, (Alpha,))])

        assert report == (
            "Missing:\n"
            f"  {__name__}.Alpha\n"
            "Incomplete:\n"
            f"  {__name__}.Ping({__name__}.Alpha)\n"
            f"  {__name__}.Pong({__name__}.Ping)"
        )

    def test_cycle_report(self) -> None:
        report = format_cycle_report([(Pong, (Ping,)), (Ping, (Pong,))])

        assert report == (
            f"Incomplete:\n  {__name__}.Ping({__name__}.Pong)\n  {__name__}.Pong({__name__}.Ping)"
        )


class TestBuildMessages:
    def test_missing_dependency_message(self, builder: ContainerBuilder) -> None:
        builder.register(Box[Alpha], factory=make_box_of_alpha)

        with pytest.raises(SoloWireDependencyMissingError) as exc_info:
            builder.build()

        assert str(exc_info.value) == (
            f"Missing:\n  {__name__}.Alpha\nIncomplete:\n  {__name__}.Box<{__name__}.Alpha>({__name__}.Alpha)"
        )

    def test_cycle_message(self, builder: ContainerBuilder) -> None:
        builder.register(Pong)
        builder.register(Ping)

        with pytest.raises(SoloWireDependencyCycleError) as exc_info:
            builder.build()

        assert str(exc_info.value) == (
            f"Incomplete:\n  {__name__}.Ping({__name__}.Pong)\n  {__name__}.Pong({__name__}.Ping)"
        )

    def test_messages_do_not_depend_on_registration_order(self) -> None:
        messages = []
        for order in ([Ping, Pong], [Pong, Ping]):
            builder = ContainerBuilder()
            for component in order:
                builder.register(component)
            with pytest.raises(SoloWireDependencyCycleError) as exc_info:
                builder.build()
            messages.append(str(exc_info.value))

        assert messages[0] == messages[1]
