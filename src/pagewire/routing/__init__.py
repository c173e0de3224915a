"""Routing: a small compiled route table.

Routes are registered during setup and compiled into regular
expressions when the app freezes.
"""

from pagewire.routing.route import Route, RouteMatch
from pagewire.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
