import argparse
import logging
import sys

from py_interceptcalc import (__version__, basicConfig, logger, Calculator, DragInterceptEngine,
                              QuadraticInterceptEngine, InterceptError, Vector, create_physics_profile)

ENGINES = {
    'drag': (DragInterceptEngine, None),
    'quadratic': (QuadraticInterceptEngine, None),
    'auto': (DragInterceptEngine, QuadraticInterceptEngine),
}


def add_geometry_group(parser):
    geometry = parser.add_argument_group('Geometry', 'Positions and target motion')
    geometry.add_argument("-s", "--shooter", nargs=3, type=float, metavar=('X', 'Y', 'Z'),
                          default=[0.0, 0.0, 0.0], help="Shooter position")
    geometry.add_argument("-t", "--target", nargs=3, type=float, metavar=('X', 'Y', 'Z'),
                          required=True, help="Target position")
    geometry.add_argument("-tv", "--velocity", nargs=3, type=float, metavar=('X', 'Y', 'Z'),
                          default=[0.0, 0.0, 0.0], help="Target velocity per step")


def add_physics_group(parser):
    physics = parser.add_argument_group('Physics', 'Overrides of the default physics profile')
    physics.add_argument("--speed", type=float, help="Launch speed per step")
    physics.add_argument("--drag", type=float, help="Drag ratio, fraction of velocity kept per step")
    physics.add_argument("--gravity", type=float, help="Gravity per step squared")


def get_arg_parser():
    parser = argparse.ArgumentParser(
        prog=f'pyic v{__version__}',
        description="Launch direction to intercept a moving target"
    )
    parser.add_argument("-v", "--version", action='version',
                        version=f'pyic v{__version__}', help="Show version")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug messages")
    parser.add_argument("-c", "--config", help="Path to .pyic.toml file")
    parser.add_argument("-e", "--engine", choices=sorted(ENGINES), default='auto',
                        help="Solver; 'auto' is the drag model with quadratic fallback")

    add_geometry_group(parser)
    add_physics_group(parser)
    return parser


def main(argv=None):
    parser = get_arg_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logger.setLevel(logging.DEBUG)
    if args.config:
        basicConfig(args.config)

    overrides = {'launch_speed': args.speed, 'drag_ratio': args.drag, 'gravity': args.gravity}
    profile = create_physics_profile(overrides)  # None values keep the defaults

    engine, fallback = ENGINES[args.engine]
    calc = Calculator(engine=engine, fallback=fallback, profile=profile)
    try:
        solution = calc.find_intercept(Vector(*args.shooter), Vector(*args.target), Vector(*args.velocity))
    except InterceptError as e:
        logger.debug(f"{e}")
        print("no solution")
        return 1

    d = solution.direction
    print(f"direction: {d.x:.6f} {d.y:.6f} {d.z:.6f}")
    print(f"flight time: {solution.time:.4f} ({solution.method.value})")
    return 0


if __name__ == '__main__':
    sys.exit(main())
