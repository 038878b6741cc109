"""Multiplayer dungeon game server: menus, shop, inventory and battles."""

from __future__ import annotations

import argparse
import itertools
import random
import re
import socketserver
import sys
import threading
from dataclasses import dataclass
from enum import Enum

from .shop import (
    GREEN,
    RED,
    RESET,
    YELLOW,
    PlayerStats,
    buy_weapon,
    equip_weapon,
    show_inventory,
    weapon_shop_menu,
)

PORT = 8080
BUFFER_SIZE = 1024
BLUE = "\033[1;34m"
CRITICAL_CHANCE = 10

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LINE_END = re.compile(r"[\r\n]")


@dataclass(frozen=True)
class Monster:
    """An enemy template with ranges for its HP, damage and gold reward."""

    name: str
    min_hp: int
    max_hp: int
    min_dmg: int
    max_dmg: int
    min_gold: int
    max_gold: int


MONSTERS = (
    Monster("Goblin", 50, 80, 5, 10, 30, 70),
    Monster("Skeleton Warrior", 80, 120, 10, 15, 50, 100),
    Monster("Dark Sorcerer", 120, 200, 15, 20, 100, 200),
)


class Menu(str, Enum):
    MAIN = "main"
    SHOP = "shop"
    INVENTORY = "inventory"
    BATTLE = "battle"


def _atoi(text):
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def main_menu(player_id):
    """Return the main menu for ``player_id``."""
    return (
        f"{GREEN}\n=== PLAYER {player_id} MAIN MENU ==={RESET}\n"
        "1. Show Player Stats\n"
        "2. Shop (Buy Weapons)\n"
        "3. View Inventory\n"
        "4. Battle Mode\n"
        "5. Exit Game\n"
        f"{YELLOW}Choose an option: {RESET}"
    )


_BATTLE_PROMPT = f"{YELLOW}1. Attack\n2. Run\nChoose action: {RESET}"


class Player:
    """One connected player and the menu they are in."""

    def __init__(self, player_id, rng=None):
        self.player_id = player_id
        self._rng = rng if rng is not None else random.Random()
        self.max_hp = 100
        self.hp = self.max_hp
        self.kills = 0
        self.stats = PlayerStats()
        self.in_battle = False
        self.current_enemy = None
        self.enemy_hp = 0
        self.menu = Menu.MAIN

    def _spawn_enemy(self):
        enemy = self._rng.choice(MONSTERS)
        self.current_enemy = enemy
        self.enemy_hp = self._rng.randint(enemy.min_hp, enemy.max_hp)

    def _battle_screen(self):
        weapon = self.stats.equipped_weapon
        return (
            f"{GREEN}\n=== BATTLE ==={RESET}\n"
            f"Enemy: {self.current_enemy.name} (HP: {self.enemy_hp})\n"
            f"Your HP: {self.hp}/{self.max_hp}\n"
            f"Weapon: {weapon.name} (Dmg: {weapon.min_damage}-{weapon.max_damage})\n"
            + _BATTLE_PROMPT
        )

    def _battle_status(self):
        return (
            f"{GREEN}\nEnemy HP: {self.enemy_hp} | Your HP: {self.hp}\n{RESET}"
            + _BATTLE_PROMPT
        )

    def show_stats(self):
        """Return the stats screen followed by the main menu."""
        weapon = self.stats.equipped_weapon
        text = (
            f"{GREEN}\n=== PLAYER STATS ==={RESET}\n"
            f"Gold: {self.stats.gold}\n"
            f"HP: {self.hp}/{self.max_hp}\n"
            f"Weapon: {weapon.name} (Damage: {weapon.min_damage}-{weapon.max_damage})\n"
        )
        if weapon.passive:
            text += f"Passive: {weapon.passive}\n"
        text += f"Kills: {self.kills}\n"
        return text + main_menu(self.player_id)

    def battle_mode(self):
        """Start a battle against a random monster and return the battle screen."""
        self._spawn_enemy()
        self.in_battle = True
        return self._battle_screen()

    def process_battle(self):
        """Resolve one attack round and return its report."""
        rng = self._rng
        weapon = self.stats.equipped_weapon
        damage = rng.randint(1, self.stats.base_damage) + rng.randint(
            weapon.min_damage, weapon.max_damage
        )
        critical = rng.randrange(100) < CRITICAL_CHANCE

        if "Dragon Claws" in weapon.name and rng.randrange(100) < weapon.passive_chance:
            damage *= weapon.passive_effect
            critical = True

        if "Staff of Light" in weapon.name and rng.randrange(100) < weapon.passive_chance:
            self.enemy_hp = 0
            response = f"{BLUE}Passive Activated: {weapon.passive}!{RESET}\n"
        else:
            if critical:
                damage *= 2
                response = f"{YELLOW}Critical Hit! {damage} Damage!{RESET}\n"
            else:
                response = f"You deal {damage} damage!\n"
            self.enemy_hp -= damage

        if self.enemy_hp <= 0:
            defeated = self.current_enemy
            reward = rng.randint(defeated.min_gold, defeated.max_gold)
            self.stats.gold += reward
            self.kills += 1
            self._spawn_enemy()
            return (
                f"{GREEN}You won! Earned {reward} gold!{RESET}\n"
                f"{RED}\nA new {self.current_enemy.name} appears!{RESET}\n"
                + self._battle_screen()
            )

        enemy = self.current_enemy
        enemy_damage = rng.randint(enemy.min_dmg, enemy.max_dmg)
        self.hp -= enemy_damage
        response += f"{RED}{enemy.name} hits you for {enemy_damage} damage!{RESET}\n"

        if self.hp <= 0:
            self.hp = self.max_hp
            self.stats.gold //= 2
            self.in_battle = False
            self.menu = Menu.MAIN
            return (
                response
                + f"{RED}You died! Lost half your gold!{RESET}\n"
                + main_menu(self.player_id)
            )

        return response + self._battle_status()

    def _main_command(self, command):
        if command == "1":
            return self.show_stats()
        if command == "2":
            self.menu = Menu.SHOP
            return weapon_shop_menu()
        if command == "3":
            self.menu = Menu.INVENTORY
            return show_inventory(self.stats)
        if command == "4":
            reply = self.battle_mode()
            self.menu = Menu.BATTLE
            return reply
        if command == "5":
            return "exit"
        return f"{RED}Invalid option!{RESET}\n" + main_menu(self.player_id)

    def _shop_command(self, command):
        index = _atoi(command) - 1
        if index == -1:
            self.menu = Menu.MAIN
            return (
                f"{YELLOW}Cancelled. Returning to Main Menu...\n{RESET}"
                + main_menu(self.player_id)
            )
        return buy_weapon(self.stats, index)

    def _inventory_command(self, command):
        index = _atoi(command) - 1
        if index == -1:
            self.menu = Menu.MAIN
            return main_menu(self.player_id)
        return equip_weapon(self.stats, index)

    def _battle_command(self, command):
        if command == "1":
            return self.process_battle()
        if command == "2":
            self.in_battle = False
            self.menu = Menu.MAIN
            return f"{YELLOW}You ran away from battle!\n{RESET}" + main_menu(self.player_id)
        return f"{RED}Invalid action!{RESET}\n" + self._battle_status()

    def handle_command(self, command):
        """Apply one command line in the current menu and return the reply."""
        handlers = {
            Menu.MAIN: self._main_command,
            Menu.SHOP: self._shop_command,
            Menu.INVENTORY: self._inventory_command,
            Menu.BATTLE: self._battle_command,
        }
        return handlers[self.menu](command)


class _GameHandler(socketserver.BaseRequestHandler):
    def handle(self):
        sock = self.request
        player = Player(self.server.next_player_id())
        print(f"Player {player.player_id} connected", flush=True)
        sock.sendall(main_menu(player.player_id).encode())
        while True:
            try:
                data = sock.recv(BUFFER_SIZE)
            except OSError:
                data = b""
            if not data:
                print(f"Player {player.player_id} disconnected", flush=True)
                break
            command = _LINE_END.split(data.decode("utf-8", errors="replace"), maxsplit=1)[0]
            print(f"Player {player.player_id} command: {command}", flush=True)
            sock.sendall(player.handle_command(command).encode())
            if command == "5" and player.menu is Menu.MAIN:
                break


class _GameServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address):
        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()
        super().__init__(address, _GameHandler)

    def next_player_id(self):
        with self._ids_lock:
            return next(self._ids)


def serve(host="0.0.0.0", port=PORT):
    """Accept players forever, one thread per connection."""
    with _GameServer((host, port)) as server:
        server.serve_forever()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Dungeon game server.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)
    print(f"Server listening on port {args.port}...", flush=True)
    try:
        serve(args.host, args.port)
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"server error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())