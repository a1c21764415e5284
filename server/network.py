"""
LAN address discovery and session URL construction.

The URL shown in the QR code must be reachable from a phone on the same
subnet, so the address is taken from the interface whose network contains the
default gateway.
"""

import ipaddress

import netifaces

from common.constants import LOOPBACK_LABEL, Routes
from server.utils.logger import logger


class DiscoveryError(Exception):
    """No usable LAN address was found."""


def _default_gateway() -> ipaddress.IPv4Address:
    gateways = netifaces.gateways()
    default = gateways.get('default', {}).get(netifaces.AF_INET)
    if not default:
        raise DiscoveryError("No default IPv4 gateway")
    return ipaddress.IPv4Address(default[0])


def find_lan_ip() -> str:
    """Return the IPv4 address of the interface on the default gateway's subnet."""
    gateway = _default_gateway()

    for iface in netifaces.interfaces():
        try:
            addrs = netifaces.ifaddresses(iface).get(netifaces.AF_INET, [])
        except ValueError:
            continue

        for addr in addrs:
            ip = addr.get('addr')
            netmask = addr.get('netmask')
            if not ip or not netmask:
                continue
            try:
                network = ipaddress.IPv4Interface(f"{ip}/{netmask}")
            except ValueError:
                continue
            if network.ip.is_loopback:
                continue
            if gateway in network.network:
                return str(network.ip)

    raise DiscoveryError(f"No interface found on the gateway {gateway} subnet")


def get_local_ip() -> str:
    """LAN IP for the QR code, or the loopback label when discovery fails."""
    try:
        return find_lan_ip()
    except (DiscoveryError, OSError, ValueError) as e:
        logger.warning(f"Failed to discover LAN IP, using {LOOPBACK_LABEL}: {e}")
        return LOOPBACK_LABEL


def build_session_url(host: str, port: int, catalog) -> str:
    """Download page when something is offered, upload page otherwise."""
    base = f"http://{host}:{port}"
    if len(catalog) > 0:
        return base + Routes.DOWNLOAD_PAGE
    return base
