"""Simple entrypoint to run a Closet Curator recommendation locally."""

from closet_app.app import ClosetCuratorApp
from models.clothing_item import ClothingItem
from models.outfit import Outfit


def main() -> None:
    app = ClosetCuratorApp()
    shirt = ClothingItem(name="Linen shirt", category="tops", color="white", style_tags=["casual"])
    chinos = ClothingItem(name="Chinos", category="bottoms", color="beige", style_tags=["casual"])
    outfit = Outfit(name="Weekend", items=[shirt, chinos], weather_tags=["warm"], style_tags=["casual"])
    for entry in app.generate_recommendations("local-user", outfits=[outfit], weather_tags=["warm"]):
        print(f"{entry.score:5.2f}  {entry.outfit.name}  ({entry.reason})")


if __name__ == "__main__":
    main()
