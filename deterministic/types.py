import click

ChainId = int
ProxyKind = str


class MinInt(click.ParamType):
    name = "minint"

    def __init__(self, min_value):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            ivalue = value
        elif value.isascii() and value.isdigit():
            ivalue = int(value)
        else:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if ivalue < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        return ivalue


class ChainIdType(MinInt):
    """A positive decimal chain id."""

    name = "chain_id"

    def __init__(self):
        super().__init__(min_value=1)


CHAIN_ID = ChainIdType()
