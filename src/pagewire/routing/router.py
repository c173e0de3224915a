"""Ordered route table.

Routes are tried in registration order; the first path that matches
wins. A path that matches with the wrong method raises
``MethodNotAllowed`` listing every method registered for it.
"""

from pagewire.errors import MethodNotAllowed, NotFound
from pagewire.routing.route import Route, RouteMatch


class Router:
    """Usage::

    router = Router()
    router.add(Route("/users/{id}", show_user, frozenset({"GET"})))
    router.compile()
    match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._routes.append(route)

    def compile(self) -> None:
        """Freeze the table. No more routes can be added."""
        self._compiled = True

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the route for *method* and *path*.

        Raises ``NotFound`` if no path matches, ``MethodNotAllowed`` if
        only the method is wrong.
        """
        allowed: set[str] = set()
        for route in self._routes:
            params = route.params_for(path)
            if params is None:
                continue
            if route.accepts(method):
                return RouteMatch(route=route, path_params=params)
            allowed |= route.methods

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")
