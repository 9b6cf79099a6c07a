"""
Resale Gate - Ticket Authenticity & Listing Admission Engine

Server-side gate deciding whether a proposed student ticket resale listing
may enter the marketplace:

- Is the presented ticket proof cryptographically genuine?
- Does the ticket's lifecycle state permit resale?
- Is the ticket already listed?
- Are price, quantity and timing within policy?
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
