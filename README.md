# heartbeat

Game logic for a small wave-based arcade game. It has no renderer and no
interactive input.

The player carries a ring of hearts, and each heart is one hit point. A thrown
heart costs a hit point and sticks to the ghost it hits. Once a heart is stuck,
holding the attack button for longer than `Player/ThrowTime` makes every marked
ghost beat. A beat damages the beating ghost, and its beat wave damages the
ghosts around it. A ghost that stays marked for `Enemy/AbsorptionTime` seconds
absorbs its hearts, which are lost, and heals. A heart that lands on the floor
flies back after a while and restores the hit point. An enemy's melee hit costs
the player an orbiting heart, knocks the player back and grants a spell of
invincibility. When the hit points reach zero the player plays a death
animation, and the game scene then hands over to the game-over scene.

## Modules

- `heartbeat.geometry`: `Vec3`, an immutable vector with `length`, `normalized`
  and `dot`, and `SphereCollider`, a sphere that follows an optional parent.
  Also defines the constants `ZERO`, `ONE`, `BASIS_X`, `BASIS_Y`, `BASIS_Z` and
  `GRAVITY`.
- `heartbeat.global_values`: `GlobalValues`, a store of tunable values in named
  groups. Each value is an `int`, a `float` or a `Vec3`. `add_value` stores a
  value only when the key is absent, and `set_value` always overwrites it.
  `export_json(group)` writes `<directory>/<group>.json` and raises `KeyError`
  for an unknown group. `import_json` and `import_json_all` load group files
  back. The default directory is `./Resources/GlobalValues`.
- `heartbeat.hp`: `PlayerHPManager` and `HPState` (`NONE`, `RECOVERY`, `DAMAGE`).
- `heartbeat.beat`: `BeatManager`, which pairs marked enemies with the hearts
  stuck to them. It starts, drives and pauses their beats, and releases the
  hearts when an enemy goes down (`enemy_down`) or absorbs them (`recovery`).
- `heartbeat.enemy`: `Enemy`, `EnemyBehavior` and `EnemyContext`. `EnemyContext`
  holds what all enemies share: the values, the managers, the target and the
  approach speed. A behaviour asked for with `request` takes effect on the next
  `update`.
- `heartbeat.enemy_manager`: `EnemyManager`, which creates enemies, registers
  their colliders, updates them and drops the inactive ones.
- `heartbeat.bullet`: `Heart` and `HeartState`. A heart orbits, is thrown,
  lands, comes back, sticks to an enemy or is lost.
- `heartbeat.sweat`: `Sweat`, the drops the player sheds after a throw at half
  hit points or below.
- `heartbeat.player`: `Player`, `PlayerState`, `Controls` and `ease_out_cubic`.
  `Controls` is one frame of input: the attack trigger, press and release, a
  stick, and four direction keys that override the stick.
- `heartbeat.timeline`: `Timeline`, `WaveData`, `PopData` and `load_wave_file`.
  A timeline plays the waves in order and releases each spawn once the wave's
  timer passes the spawn's delay. The next wave starts when every spawn has
  been released and no enemy is left.
- `heartbeat.editor`: `TimelineEditor`, `EditType` and `ray_to_ground`. The
  editor selects waves and spawns; adds, moves and removes spawns; sets a
  spawn's facing; sorts spawns by delay; and starts and stops a demo play.
  `export_json_all` writes the timeline back to disk.
- `heartbeat.game`: `CollisionWorld` and `GameScene`.
  - `CollisionWorld` holds named groups of colliders. It fires
    `on_collision_enter` on both colliders only on the frame their overlap
    begins.
  - `GameScene` ties the other modules together. Each frame calls
    `begin(controls)`, then `update(dt)`, then `late_update()`. `next_scene()`
    returns a `GameOverScene` once the player has fallen.
- `heartbeat.scenes`: `MenuScene` and its subclasses `TitleScene`,
  `TutorialScene` and `GameOverScene`. `update(enter_pressed)` returns a new
  `GameScene` when Enter is pressed, and `None` otherwise.

## Driving a game from code

```python
from heartbeat.game import GameScene
from heartbeat.player import Controls

scene = GameScene(timeline_directory="Resources/GameScene/Timeline")
for frame in range(600):
    scene.begin(Controls(up=True, attack_released=(frame == 30)))
    scene.update(1 / 60)
    scene.late_update()
    if scene.next_scene() is not None:
        break
print(scene.hp_manager.hp, len(scene.enemy_manager))
```

## Data files

Paths are relative to the working directory unless you pass others:

- `Resources/GameScene/Timeline/Timeline.json` lists the wave files under
  `"WaveFiles"`. If it is missing, `Timeline.load_all` raises
  `FileNotFoundError`. `GameScene` logs a warning and starts with no waves.
- `Resources/GameScene/Timeline/WaveData/NN.json` describes one wave each, with
  `"PlayerHitPoint"`, `"EnemyApproachSpeed"` and `"PopData"`. `"PopData"` is an
  object keyed `"00"`, `"01"`, and so on, and each entry holds `"Delay"`,
  `"Translate"` and `"Forward"`. A wave file that cannot be opened is skipped
  with a warning.
- `Resources/GlobalValues/<Group>.json` holds the values of one group.

## Command

Installing the package provides the `heartbeat` command:

    heartbeat --frames 600 --dt 0.0166667 --timeline Resources/GameScene/Timeline --seed 1

The command runs a `GameScene` headless for the given number of fixed-length
frames, with no input. It then prints a one-line summary: the scene, and for a
game scene the wave, the hit points and the number of live enemies.

| Option | Default | Meaning |
| --- | --- | --- |
| `--frames` | 600 | Number of frames to run |
| `--dt` | 1/60 | Seconds per frame |
| `--timeline` | `./Resources/GameScene/Timeline` | Timeline directory |
| `--seed` | none | Seed for the sweat's random offsets |

## What this package does not do

- It draws nothing and plays no sound. Positions, scales, rotations, marker
  percentages and the player's blinking (`Player.is_visible`) are exposed for a
  front end to use, but no front end is included.
- It reads no keyboard, pad or mouse. Input reaches the game only as `Controls`
  values and the `enter_pressed` flag of the menu scenes.
- The timeline editor has no on-screen interface. It is driven through
  `TimelineEditor` methods and `ray_to_ground`.
- There is no window for editing `GlobalValues` while the game runs. Values are
  changed in code or in the JSON files.