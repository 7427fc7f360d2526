from typing import List, Sequence, Tuple


def choose_recipients(players: Sequence, table: Sequence[int], target: int) -> Tuple[bool, List]:
    """Decide who picks up the table pile when a smash window closes.

    Returns ``(correct, recipients)``.

    - Correct smash (top card equals the target symbol): every player who
      did not react takes the pile; when everybody reacted, the slowest
      reactor (latest timestamp, first seat on ties) takes it.
    - Incorrect smash: every player who reacted takes the pile. Nobody
      reacting means nobody takes anything.

    Does not mutate its inputs.
    """
    correct = bool(table) and table[-1] == target
    reactors = [p for p in players if p.smash_time != 0]
    if not correct:
        return False, reactors

    idle = [p for p in players if p.smash_time == 0]
    if idle:
        return True, idle
    if not reactors:
        return True, []
    return True, [max(reactors, key=lambda p: p.smash_time)]
