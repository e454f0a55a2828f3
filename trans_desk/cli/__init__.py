"""Trans-Desk CLI 模块入口。"""

from trans_desk.cli.main import app

__all__ = ["app"]
