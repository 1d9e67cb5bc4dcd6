import enum


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def point_at(code: str, idx: int, context: int = 10) -> str:
    """Excerpt of ``code`` around ``idx`` with a caret line underneath"""
    print_start_idx = max(0, idx - context)
    print_ellipsis_pre = print_start_idx > 0
    print_end_idx = min(len(code), idx + context)
    print_ellipsis_post = print_end_idx < len(code)
    return "\n".join(
        [
            (
                ("..." if print_ellipsis_pre else "")
                + code[print_start_idx:print_end_idx]
                + ("..." if print_ellipsis_post else "")
            ),
            " " * (idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
        ]
    )
