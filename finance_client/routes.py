"""Route table and the guard in front of the dashboard layout."""

from dataclasses import dataclass

from finance_client.auth import TokenStore

LOGIN_PATH = '/login'
SIGNUP_PATH = '/signup'
HOME_PATH = '/'


@dataclass(frozen=True)
class Route:
    path: str
    view: str
    protected: bool = False


@dataclass(frozen=True)
class NavItem:
    name: str
    path: str


@dataclass(frozen=True)
class Resolution:
    view: str | None = None
    redirect: str | None = None
    status: int = 200


ROUTES = (
    Route(LOGIN_PATH, 'login'),
    Route(SIGNUP_PATH, 'signup'),
    Route(HOME_PATH, 'home', protected=True),
    Route('/transactions', 'transactions', protected=True),
)

NAV_ITEMS = (
    NavItem('Overview', '/'),
    NavItem('Transactions', '/transactions'),
    NavItem('Budget', '/budget'),
    NavItem('Pots', '/pots'),
    NavItem('Recurring Bills', '/recurring-bills'),
)


def normalize_path(path: str) -> str:
    path = path.split('?', 1)[0].split('#', 1)[0].strip() or HOME_PATH
    if not path.startswith('/'):
        path = '/' + path
    if len(path) > 1:
        path = path.rstrip('/') or HOME_PATH
    return path


def find_route(path: str) -> Route | None:
    normalized = normalize_path(path)
    for route in ROUTES:
        if route.path == normalized:
            return route
    return None


def resolve(path: str, token_store: TokenStore) -> Resolution:
    route = find_route(path)
    if route is None:
        return Resolution(status=404)
    if route.protected and not token_store.is_authenticated():
        return Resolution(redirect=LOGIN_PATH, status=302)
    return Resolution(view=route.view)
