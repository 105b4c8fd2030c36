"""Selectors for the submissions portal."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def nth(locator: str, index: int) -> str:
    return f"{locator} >> nth={index}"


def within(parent: str, child: str) -> str:
    return f"{parent} >> {child}"


class PortalLocators(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str = 'input[id="username"]'
    password: str = 'input[id="password"]'
    client_filter: str = 'input[id="brand"]'
    task_row: str = '.rt-tr-group:has(a[href^="/submission/"]) >> nth=0'
    task_id_cell: str = 'div[style*="flex: 300 0 auto;"]'
    task_view_link: str = 'a:has-text("VIEW")'
    list_ready: str = 'a[href^="/submission/"]:has-text("VIEW") >> nth=0'
    reviewer: str = 'div.col:has-text("Reviewer:") >> nth=0'
    approve_button: str = 'button.btn-success:has-text("Approve (A)")'
    evidence_container: str = '//*[@id="root"]/div/div[2]/div/div/div[3]/div[1]/div[2]/div'
    evidence_thumbnail: str = "img.thumb"

    def task_id(self) -> str:
        return within(self.task_row, self.task_id_cell)

    def task_view(self) -> str:
        return within(self.task_row, self.task_view_link)

    def thumbnails(self) -> str:
        return within(self.evidence_container, self.evidence_thumbnail)
