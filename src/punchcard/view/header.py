# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional

from rich import print
from rich.padding import Padding

from punchcard.view.state import get_show_header


def header(storage_folder: Optional[Path], sub_header: Optional[str] = None) -> None:
    """Print the application header with the storage folder in use.

    Args:
        storage_folder: Path of the shared folder, None when not configured
        sub_header: Optional sub-header text to display
    """
    if not get_show_header():
        return

    additional = ""
    if sub_header is not None:
        additional = f"[sandy_brown]{sub_header}[/sandy_brown]"
    folder = (
        f"[plum1]{storage_folder}[/plum1]"
        if storage_folder is not None
        else "[red]no storage folder[/red]"
    )

    print(Padding("[dark_orange]punchcard[/dark_orange]", (1, 0, 0, 1)))
    print(Padding(additional, (0, 1)))
    print(Padding(folder, (0, 1)))
