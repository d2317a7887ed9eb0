from click import Choice

from mdlyricgetter.writer import OutputFormat


class FormatChoice(Choice):
    """
    A click Choice type to pick an output format.
    """

    def __init__(self):
        super().__init__([output_format.value for output_format in OutputFormat], case_sensitive=False)

    def convert(self, value, param, ctx):
        if isinstance(value, OutputFormat):
            return value

        # Validate and normalize allowed choice strings
        value = super().convert(value, param, ctx)

        return OutputFormat(value)
