"""Installation layout, dataset loading and the navigation data context.

Typical usage:
    from xpnav.core.config import NavSettings
    from xpnav.data.manager import NavDataContext

    context = NavDataContext(NavSettings(xplane_path=Path("/opt/X-Plane 12")))
    await context.reload()
"""
