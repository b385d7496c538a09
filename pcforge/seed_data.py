from sqlmodel import Session, select

from .database import engine
from .models.catalog import Component, ExtraStorageItem


COMPONENT_PRICES = {
    "processor": [
        ("cpu-1", "AMD Ryzen 5 5500 (6C/12T)", 6899),
        ("cpu-2", "AMD Ryzen 5 5600X (6C/12T)", 11179),
        ("cpu-3", "AMD Ryzen 5 9600X (6C/12T)", 25629),
        ("cpu-4", "Intel Core i5-12400F (6C/12T)", 9699),
        ("cpu-5", "Intel Core i7-12700 (12C/20T)", 25899),
        ("cpu-6", "AMD Ryzen 3 5300G (4C/8T)", 10976),
        ("cpu-7", "Intel Xeon Gold 5118 (12C/24T)", 34756),
        ("cpu-8", "AMD Ryzen Threadripper PRO 7965WX (24C/48T)", 349990),
    ],
    "graphics": [
        ("gpu-1", "Zotac GeForce GTX 1650 (4GB GDDR6)", 16499),
        ("gpu-2", "INNO3D GeForce RTX 3050 (8GB GDDR6)", 19099),
        ("gpu-3", "ASUS Dual Radeon RX 6600 (8GB GDDR6)", 20849),
        ("gpu-4", "GIGABYTE GeForce RTX 3060 (12GB GDDR6)", 24799),
        ("gpu-5", "GIGABYTE GeForce RTX 4060 Ti (8GB GDDR6)", 40089),
        ("gpu-6", "PNY GeForce RTX 4090 Verto (24GB GDDR6X)", 305999),
        ("gpu-7", "Asus Phoenix Radeon PH-550-2G (2GB GDDR5)", 7020),
    ],
    "memory": [
        ("ram-1", "ADATA XPG Gammix D30 DDR4-3200 16GB (8GBx2)", 3500),
        ("ram-2", "Patriot Signature Premium DDR5-5600 24GB", 9486),
        ("ram-3", "ADATA XPG Gammix D35G DDR4-3200 32GB", 4899),
        ("ram-4", "Kingston ValueRAM KVR32N22S8L/8 DDR4-3200 8GB", 1299),
        ("ram-5", "CORSAIR Vengeance RGB DDR5-5200 16GB", 4828),
        ("ram-6", "Crucial PRO DDR5-5600 32GB", 8799),
    ],
    "storage": [
        ("storage-1", "Crucial P3 Plus NVMe Gen4 500GB", 3150),
        ("storage-2", "Samsung 980 Pro NVMe Gen4 1TB", 9000),
        ("storage-3", "WD SN850X NVMe Gen4 1TB", 9500),
        ("storage-4", "Samsung 980 Pro NVMe Gen4 2TB", 15000),
        ("storage-5", "WD SN850X NVMe Gen4 2TB", 16000),
    ],
    "cooling": [
        ("cooling-1", "Cooler Master ML240L V2 240mm AIO", 7500),
        ("cooling-2", "Noctua NH-D15 Air Cooler", 6500),
    ],
    "power": [
        ("psu-1", "Cooler Master MWE 750W 80+ Gold", 7500),
        ("psu-2", "Corsair RM850x 850W 80+ Gold", 9500),
    ],
    "motherboard": [
        ("mobo-1", "ZEBRONICS H61-NVMe (LGA 1155)", 1184),
        ("mobo-2", "MSI PRO H610M-E DDR4 (LGA 1700)", 5999),
        ("mobo-3", "GIGABYTE H610M S2H DDR4 (LGA 1700)", 7199),
        ("mobo-4", "ASRock Z890 Pro RS WiFi (LGA 1700)", 26868),
    ],
    "case": [
        ("case-1", "NZXT H510 Mid-Tower ATX (Tempered Glass, RGB)", 5500),
        ("case-2", "Lian Li PC-O11 Dynamic ATX Premium Build", 9500),
    ],
}

EXTRA_STORAGE = [
    ("hdd-1tb", "Seagate Barracuda 1TB HDD", 3200, "7200 RPM bulk storage"),
    ("hdd-2tb", "Seagate Barracuda 2TB HDD", 4500, "7200 RPM bulk storage"),
    ("ssd-500", "Kingston A400 500GB SATA SSD", 2800, "Extra SATA SSD"),
    ("nvme-1tb", "Crucial P3 1TB NVMe", 5200, "Secondary NVMe drive"),
]


def seed_catalog(session: Session) -> None:
    """
    Seeds the component catalog and extra storage options.
    Skips seeding if the Component table is non-empty.
    """
    if session.exec(select(Component)).first():
        return

    for category, rows in COMPONENT_PRICES.items():
        session.add_all(
            Component(component_id=cid, category=category, name=name, price=price, stock=10)
            for cid, name, price in rows
        )
    session.add_all(
        ExtraStorageItem(item_id=iid, name=name, price=price, description=desc)
        for iid, name, price, desc in EXTRA_STORAGE
    )
    session.commit()


def seed_master_data() -> None:
    with Session(engine) as session:
        seed_catalog(session)
