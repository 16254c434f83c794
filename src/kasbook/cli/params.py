"""Shared click parameter types and context accessors."""

import click

from kasbook.database.base import Database
from kasbook.domain.entities import OperatorContext, SpendingItem
from kasbook.utils.amount_parser import parse_amount


class RupiahAmount(click.ParamType):
    """Whole-Rupiah amount accepting "150000", "Rp 150.000" or "150rb"."""

    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            amount = parse_amount(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)
        if amount < 0:
            self.fail(f"Amount cannot be negative: {value}", param, ctx)
        return amount


AMOUNT = RupiahAmount()


def get_db(ctx: click.Context) -> Database:
    return ctx.obj["db"]


def get_operator(ctx: click.Context) -> OperatorContext:
    return ctx.obj["operator"]


def get_max_attempts(ctx: click.Context) -> int:
    return ctx.obj["max_attempts"]


class SpendingItemParam(click.ParamType):
    """Spending item written as ``DESCRIPTION=AMOUNT``, e.g. ``"Makan siang=25rb"``."""

    name = "item"

    def convert(self, value, param, ctx):
        if isinstance(value, SpendingItem):
            return value
        description, sep, amount_text = value.rpartition("=")
        if not sep or not description.strip():
            self.fail(f"Expected DESCRIPTION=AMOUNT, got '{value}'", param, ctx)
        try:
            amount = parse_amount(amount_text)
        except ValueError as e:
            self.fail(str(e), param, ctx)
        if amount < 0:
            self.fail(f"Amount cannot be negative: {amount_text}", param, ctx)
        return SpendingItem(description.strip(), amount)


SPENDING_ITEM = SpendingItemParam()
