"""Weapon shop and inventory handling for the dungeon game."""

from __future__ import annotations

from dataclasses import dataclass, field

WEAPON_COUNT = 5
MAX_ITEMS = 10

RED = "\033[1;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
RESET = "\033[0m"


@dataclass(frozen=True)
class Weapon:
    """A weapon as sold in the shop or carried by a player."""

    id: int
    name: str
    min_damage: int
    max_damage: int
    price: int
    passive: str = ""
    passive_chance: int = 0
    passive_effect: int = 0


WEAPON_SHOP = (
    Weapon(0, "Stone Spear", 5, 15, 50),
    Weapon(1, "Diamond Sword", 15, 25, 150),
    Weapon(2, "Buster Sword", 20, 30, 200),
    Weapon(3, "Staff of Light", 10, 20, 120, "10% Insta-Kill", 10, 9999),
    Weapon(4, "Excalibur", 25, 35, 300, "30% Critical Hit", 30, 2),
)

FISTS = Weapon(0, "Fists", 0, 0, 0)


@dataclass
class PlayerStats:
    """Gold, carried weapons and the weapon in hand."""

    gold: int = 500
    inventory: list = field(default_factory=list)
    equipped_weapon: Weapon = FISTS
    base_damage: int = 5


def weapon_shop_menu():
    """Return the shop listing with its purchase prompt."""
    lines = [f"{GREEN}\n=== WEAPON SHOP ===\n{RESET}"]
    for number, weapon in enumerate(WEAPON_SHOP, start=1):
        passive = f", {weapon.passive}" if weapon.passive else ""
        lines.append(
            f"[{number}] {weapon.name} - {weapon.price} gold "
            f"(Dmg: {weapon.min_damage}-{weapon.max_damage}{passive})\n"
        )
    lines.append(f"{YELLOW}Enter weapon number to buy (0 to cancel): {RESET}")
    return "".join(lines)


def buy_weapon(stats, weapon_index):
    """Buy the shop weapon at ``weapon_index`` (0-based) and return the reply text."""
    if not 0 <= weapon_index < WEAPON_COUNT:
        return f"{RED}Invalid weapon selection.\n{RESET}"
    if len(stats.inventory) >= MAX_ITEMS:
        return f"{RED}Inventory full! Cannot buy more weapons.\n{RESET}"

    weapon = WEAPON_SHOP[weapon_index]
    if stats.gold < weapon.price:
        return (
            f"{RED}Not enough gold to buy {weapon.name}! "
            f"Need {weapon.price}, have {stats.gold}\n{RESET}"
        )

    stats.inventory.append(weapon)
    stats.gold -= weapon.price
    return (
        f"{GREEN}You bought {weapon.name}!\n{RESET}"
        f"Remaining gold: {stats.gold}\n"
        f"Inventory slots used: {len(stats.inventory)}/{MAX_ITEMS}\n"
        + weapon_shop_menu()
    )


def show_inventory(stats):
    """Return the inventory listing, marking the equipped weapon."""
    lines = [f"{GREEN}\n=== INVENTORY ===\n{RESET}"]
    for number, weapon in enumerate(stats.inventory, start=1):
        marker = (
            f"{GREEN} (EQUIPPED){RESET}"
            if weapon.name == stats.equipped_weapon.name
            else ""
        )
        lines.append(
            f"[{number}] {weapon.name} "
            f"(Dmg: {weapon.min_damage}-{weapon.max_damage}){marker}\n"
        )
    lines.append(f"{YELLOW}Choose weapon to equip (0 to cancel): {RESET}")
    return "".join(lines)


def equip_weapon(stats, item_index):
    """Equip the inventory weapon at ``item_index`` (0-based) and return the reply text."""
    if not 0 <= item_index < len(stats.inventory):
        return f"{RED}Invalid selection! No weapon at that slot.\n{RESET}"
    stats.equipped_weapon = stats.inventory[item_index]
    return f"{GREEN}Equipped {stats.equipped_weapon.name}!\n{RESET}" + show_inventory(stats)