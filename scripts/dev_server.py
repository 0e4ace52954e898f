# scripts/dev_server.py
import os
import socket
import sys
import logging
from pathlib import Path

import psutil

# Add the parent directory to the Python path properly
current_dir = Path(__file__).resolve().parent
backend_dir = current_dir.parent
sys.path.insert(0, str(backend_dir))

logger = logging.getLogger(__name__)

# Interfaces to prefer, in order, when several LAN addresses exist
PREFERRED_INTERFACES = ['en0', 'en1', 'en2', 'eth0', 'Wi-Fi', 'wlan0', 'wlan1']


def select_local_address(interfaces=None):
    """Pick a non-loopback IPv4 address, favouring PREFERRED_INTERFACES"""
    if interfaces is None:
        interfaces = psutil.net_if_addrs()

    candidates = []
    for name, addresses in interfaces.items():
        for addr in addresses or []:
            if addr.family == socket.AF_INET and not addr.address.startswith('127.'):
                candidates.append((name, addr.address))

    if not candidates:
        return None

    for preferred in PREFERRED_INTERFACES:
        for name, address in candidates:
            if name == preferred:
                return address
    return candidates[0][1]


def main():
    from app import app

    host = select_local_address() or '0.0.0.0'
    port = int(os.getenv('PORT', 5001))
    os.environ['HOST'] = host
    logger.info(f"Starting development server on http://{host}:{port}")
    app.run(host=host, port=port, debug=True)


if __name__ == '__main__':
    main()
