import random
from datetime import datetime, timedelta, timezone

from winniluck.db.engine import get_sessionmaker, make_engine
from winniluck.models import Base
from winniluck.race import Player
from winniluck.storage import SQLAlchemyStore
from winniluck.workflows import run_race

PLAYER_NAMES = [
    "Alice", "Bob", "Carol", "Dave", "Erin", "Frank", "Grace", "Heidi", "Ivan", "Judy",
    "Mallory", "Niaj", "Olivia", "Peggy", "Rupert", "Sybil", "Trent", "Uma", "Victor", "Walter",
]


def main() -> None:
    """Reset the development database and fill it with a week of races."""
    engine = make_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    store = SQLAlchemyStore(get_sessionmaker(engine))

    players = [Player(display_name=name) for name in PLAYER_NAMES]
    for player in players:
        store.save_player(player)

    modes = store.fetch_game_modes()
    rng = random.Random(2024)
    now = datetime.now(timezone.utc)

    for day in range(7):
        for mode in modes:
            entrants = rng.sample(players, k=mode.max_players)
            numbers = list(range(1, mode.max_players + 1))
            rng.shuffle(numbers)
            seated = [p.with_number(n) for p, n in zip(entrants, numbers)]
            run = run_race(
                mode,
                seated,
                store=store,
                rng=rng,
                played_at=now - timedelta(days=day, hours=rng.randint(0, 10)),
            )
            print(
                f"{mode.title}: winners {list(run.session.winning_numbers)} "
                f"profit {run.session.profit}"
            )

    print("Seeded:", store.storage_info())


if __name__ == "__main__":
    main()
