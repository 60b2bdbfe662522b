"""
Built-in public site content.

Rendered whenever the database has nothing published for a page (or cannot
be reached), so the marketing site never shows an empty shell.
"""
from __future__ import annotations

CONTACT_EMAIL = "info@alliancecomputer.co"
CONTACT_PHONE = "+251913111511"

FALLBACK_HERO_SLIDES = [
    {
        "category": "Geo-Physical Equipments",
        "title": "Precision Instruments for",
        "emphasis": "Subsurface Exploration",
        "description": (
            "Industry-leading magnetic and electromagnetic surveying tools. Engineered for reliability "
            "in the most challenging field conditions."
        ),
        "image_url": "https://guidelinegeo.com/wp-content/uploads/2025/08/Active-Guidance-image.png",
        "link": "/services/geophysical",
    },
    {
        "category": "ICT INFRASTRUCTURE",
        "title": "Enterprise Servers &",
        "emphasis": "Network Infrastructure",
        "description": (
            "Enterprise-grade networking and secure infrastructure. We build the backbone that powers "
            "modern business connectivity."
        ),
        "image_url": (
            "https://images.unsplash.com/photo-1518770660439-4636190af475?q=80&w=2500&auto=format&fit=crop"
        ),
        "link": "/services/it-infrastructure",
    },
]

# Sector slug -> admin card + public fallback page.
SECTORS = {
    "geophysical": {
        "name": "Geophysical Instrumentation",
        "summary": "Groundwater, mineral exploration & borehole systems.",
        "icon": "Drill",
        "hero_eyebrow": "Geophysical Supply",
        "hero_title_main": "Advanced",
        "hero_title_italic": "Geophysical",
        "hero_description": (
            "From groundwater detection to deep mineral exploration, we provide the instrumentation "
            "that defines subsurface clarity."
        ),
        "hero_image": (
            "https://guidelinegeo.com/wp-content/uploads/2025/08/"
            "ABEM-Terrameter-LS-2-heroimage-3-morgans-terrameter-green-fields-and-forest-944x763-1.jpg"
        ),
        "portfolio_title": "Our Equipment Portfolio",
        "portfolio_description": (
            "Sourcing high-performance field instruments for engineering, research, and exploration."
        ),
        "cta_title": "Technical Procurement",
        "cta_description": (
            "Connect with our specialists for detailed equipment specifications, lead times, and "
            "comprehensive quotation packages."
        ),
        "sections": [
            {
                "title": "Resistivity & Terrameter Systems",
                "description": (
                    "The gold standard for electrical imaging. We supply systems designed for high-resolution "
                    "mapping of groundwater resources and mineral bodies, ensuring durability in extreme field "
                    "conditions."
                ),
                "features": [
                    "ABEM Terrameter LS2 Supply",
                    "Advanced Multi-electrode Imaging",
                    "High-Power Signal Processing",
                ],
                "image_url": "https://guidelinegeo.com/wp-content/uploads/2025/08/PowerAdapter1_web-1536x866-1.png",
            },
            {
                "title": "Magnetics & Gradiometers",
                "description": (
                    "Ultra-sensitive magnetic survey instruments. Essential for mineral exploration and "
                    "geological mapping where precision in detecting magnetic anomalies is paramount."
                ),
                "features": [
                    "Proton Precession Sensors",
                    "Overhauser Magnetometers",
                    "Real-time Field Visualization",
                ],
                "image_url": "https://www.geometrics.com/wp-content/uploads/2020/01/Front-Angle-1.jpg",
            },
            {
                "title": "Borehole Logging Systems",
                "description": (
                    "Integrated subsurface data acquisition. We provide the full stack: from digital probes "
                    "and winches to the surface control units that manage the data stream."
                ),
                "features": [
                    "Slimline Digital Probes",
                    "Electric & Manual Winch Systems",
                    "Multi-parameter Data Collection",
                ],
                "image_url": "https://iirnrwxhlkrk5q.leadongcdn.com/cloud/lnBqkKoiSRnloqmloriq/5.png",
            },
        ],
    },
    "it-infrastructure": {
        "name": "IT Infrastructure",
        "summary": "Servers, networking & datacenter hardware.",
        "icon": "Server",
        "hero_eyebrow": "Infrastructure Supply",
        "hero_title_main": "Enterprise",
        "hero_title_italic": "Infrastructure",
        "hero_description": (
            "Equipping organizations with high-performance servers, networking, and storage hardware "
            "required for mission-critical operations."
        ),
        "hero_image": (
            "https://www.tglobalcorp.com/upload/news_solutions_b/enL_news_solutions_24B01_uf64JrbpW0.webp"
        ),
        "portfolio_title": "Hardware Solutions",
        "portfolio_description": "Authentic hardware from globally trusted vendors including Dell, HPE, and Cisco.",
        "cta_title": "Infrastructure Quotation",
        "cta_description": (
            "Ready to scale your digital architecture? Contact our IT procurement team for server "
            "configurations, networking specs, and volume pricing."
        ),
        "sections": [
            {
                "title": "Enterprise Server Systems",
                "description": (
                    "Mission-critical computing power. We supply high-performance Rack, Tower, and Blade "
                    "servers from industry leaders like Dell EMC and HPE, optimized for virtualization and "
                    "enterprise workloads."
                ),
                "features": [
                    "Dell PowerEdge & HPE ProLiant Supply",
                    "High-Density Computing Nodes",
                    "Scalable Storage-Rich Servers",
                ],
                "image_url": (
                    "https://www.cisco.com/content/dam/cisco-cdc/site/images/photography/product-photography/"
                    "learn/what-is-in-a-data-center-body-1920x1080.jpg"
                ),
            },
            {
                "title": "Networking & Connectivity",
                "description": (
                    "The backbone of digital communication. Our portfolio includes enterprise-grade managed "
                    "switches, core routers, and secure wireless hardware for institutional-scale connectivity."
                ),
                "features": [
                    "Layer 3 Managed Switching",
                    "High-Capacity Core Routers",
                    "Enterprise Firewall Appliances",
                ],
                "image_url": (
                    "https://images.unsplash.com/photo-1544197150-b99a580bb7a8?auto=format&fit=crop&q=80&w=2000"
                ),
            },
            {
                "title": "Datacenter & Storage",
                "description": (
                    "Scalable storage and rack infrastructure. From SAN/NAS solutions to professional cabinets "
                    "and structured cabling hardware, we provide the foundations for modern data hubs."
                ),
                "features": [
                    "All-Flash Storage Arrays",
                    "Structured Cabling Systems",
                    "Rack & Power Infrastructure",
                ],
                "image_url": (
                    "https://www.cisco.com/content/dam/cisco-cdc/site/images/photography/lifestyle-photography/"
                    "learn/modern-data-center-body-1920x1080.jpg"
                ),
            },
        ],
    },
}

# Directory cards shown on /services when no service page is published.
FALLBACK_SERVICE_CARDS = [
    {
        "slug": "geophysical",
        "title": "Geophysical Instrumentation",
        "description": (
            "Specialized supply of resistivity meters, seismic sensors, and borehole logging systems for "
            "subsurface exploration."
        ),
        "tags": ["Resistivity Systems", "Borehole Logging"],
        "image_url": "https://images.unsplash.com/photo-1518709268805-4e9042af9f23?auto=format&fit=crop&q=80&w=2000",
    },
    {
        "slug": "it-infrastructure",
        "title": "Enterprise IT Infrastructure",
        "description": (
            "Hardware supply for modern digital cores. Datacenter server nodes, storage, and networking appliances."
        ),
        "tags": ["Server Nodes", "Network Security"],
        "image_url": "https://images.unsplash.com/photo-1544197150-b99a580bb7a8?auto=format&fit=crop&q=80&w=2000",
    },
]

ABOUT_PILLARS = [
    {
        "title": "Authentic Procurement",
        "description": (
            "We source directly from globally recognized manufacturers, ensuring every piece of hardware is "
            "genuine and certified."
        ),
    },
    {
        "title": "Technical Expertise",
        "description": (
            "Our team understands the specifications required for deep-earth exploration and high-density "
            "digital architecture."
        ),
    },
    {
        "title": "Regional Commitment",
        "description": (
            "Based in Addis Ababa, we bridge the gap between global technology and local operational requirements."
        ),
    },
]

CONTACT_SUBJECTS = [
    "Geophysical Equipment Supply",
    "IT Infrastructure & Servers",
    "Project Consultation",
]


def sector_config(slug: str) -> dict | None:
    return SECTORS.get(slug)
