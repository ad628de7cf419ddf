import logging
import time

import click
import socketio

from .aimbot import AimBot, AimClient
from .viewer import Viewer


def _setup_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


@click.command()
@click.option('--url', default='http://localhost:3000', envvar='FAXHUNT_URL', show_default=True)
@click.option('--client-id', required=True, envvar='FAXHUNT_CLIENT_ID')
@click.option('--secret', required=True, envvar='FAXHUNT_CLIENT_SECRET')
@click.option('--lead', default=0.4, show_default=True, help='Prediction lead time in seconds.')
@click.option('--shots', default=5, show_default=True, help='Shots per cluster.')
@click.option('--spread', default=30.0, show_default=True, help='Cluster radius.')
@click.option('--max-rounds', default=100, show_default=True)
@click.option('--max-attempts', default=5, show_default=True)
@click.option('-v', '--verbose', is_flag=True)
def aim(url, client_id, secret, lead, shots, spread, max_rounds, max_attempts, verbose):
    """Join the game and shoot at the predicted target position."""
    _setup_logging(verbose)
    with AimClient(url) as client:
        bot = AimBot(client, client_id, secret, lead=lead, shots=shots, spread=spread,
                     max_rounds=max_rounds, max_attempts=max_attempts)
        outcome = bot.run()
    click.echo(f"Finished: {outcome} after {bot.rounds} rounds, {bot.shots_fired} shots")
    if outcome not in ('won', 'game-over'):
        raise SystemExit(1)


@click.command()
@click.option('--url', default='http://localhost:3000', envvar='FAXHUNT_URL', show_default=True)
@click.option('--fps', default=10, show_default=True, help='Frames logged per second.')
@click.option('--duration', default=0.0, help='Seconds to watch; 0 watches until interrupted.')
@click.option('-v', '--verbose', is_flag=True)
def watch(url, fps, duration, verbose):
    """Follow the broadcast feed and log the smoothed target position."""
    _setup_logging(verbose)
    log = logging.getLogger('faxhunt.client.watch')
    viewer = Viewer()
    sio = socketio.Client()
    viewer.attach(sio)
    sio.connect(url)
    started = time.monotonic()
    try:
        while not duration or time.monotonic() - started < duration:
            frame = viewer.frame()
            target = frame['target']
            if target:
                log.info(f"target=({target['x']:.1f}, {target['y']:.1f}) shots={len(frame['shots'])} players={len(frame['players'])}")
            else:
                log.info(f"game over, winner={frame['winner']}")
            sio.sleep(1.0 / fps)
    except KeyboardInterrupt:
        pass
    finally:
        sio.disconnect()
