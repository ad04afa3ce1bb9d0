import pygame

from pygame_keyframes.actor import Actor, ActorConfig
from pygame_keyframes.events import (
    UI_ACTOR_KEYFRAME_PROPERTY_ADDED, UI_ACTOR_TIMELINE_MODIFIED, PygameEventOwner
)

LOOP_MILLISECONDS = 4000


def render_ball(surface: pygame.Surface, state: dict):
    position = (int(state['x']), int(state['y']))
    pygame.draw.circle(surface, pygame.Color(state['color']), position, int(state['radius']))


class ActorDemoApp:
    """Bounces a ball around a window along an actor's timeline"""

    def __init__(self):
        pygame.init()
        self.screen_size = (800, 600)
        self.screen = pygame.display.set_mode(self.screen_size)
        pygame.display.set_caption("Actor Demo - Click to add a keyframe")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 24)

        self.elapsed = 0
        self.status = ""
        self.actor = Actor(ActorConfig(context=self.screen, render=render_ball), owner=PygameEventOwner())
        self._create_timeline()

    def _create_timeline(self):
        self.actor \
            .keyframe(0, {'x': 100, 'y': 100, 'radius': 20, 'color': pygame.Color(220, 60, 60)}) \
            .keyframe(1000, {'x': 700, 'y': 100}, 'easeOutBounce') \
            .keyframe(2000, {'x': 700, 'y': 500, 'radius': 40, 'color': pygame.Color(60, 120, 220)},
                      {'y': 'easeInOutSine', 'radius': 'easeOutBack'}) \
            .keyframe(3000, {'x': 100, 'y': 500}, 'easeInOutCubic') \
            .keyframe(LOOP_MILLISECONDS, {'x': 100, 'y': 100, 'radius': 20,
                                          'color': pygame.Color(220, 60, 60)}) \
            .keyframe(3000, self._on_heading_home)

    def _on_heading_home(self, actor, drift):
        self.status = f"Heading home, {drift} ms late"

    def _add_keyframe_at_mouse(self, position):
        millisecond = self.elapsed
        if self.actor.has_keyframe_at(millisecond):
            return
        self.actor.keyframe(millisecond, {'x': position[0], 'y': position[1]}, 'easeOutQuad')

    def run(self):
        """Main application loop"""
        running = True

        while running:
            previous = self.elapsed
            self.elapsed = (self.elapsed + self.clock.tick(60)) % (LOOP_MILLISECONDS + 1)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                elif event.type == pygame.MOUSEBUTTONDOWN:
                    self._add_keyframe_at_mouse(event.pos)
                elif event.type == UI_ACTOR_KEYFRAME_PROPERTY_ADDED:
                    self.status = f"Added {event.track_name} @ {event.millisecond} ms"
                elif event.type == UI_ACTOR_TIMELINE_MODIFIED:
                    self.status += f" (timeline is now {event.actor.get_length()} ms)"

            # Only a wrap back to the start re-arms function keyframes
            self.actor.update_state(self.elapsed, rearm_function_keyframes=self.elapsed < previous)

            self.screen.fill((30, 30, 30))
            if self.actor.was_active:
                self.actor.render(self.actor.context, self.actor.get())

            label = self.font.render(f"{self.elapsed:>5} ms  {self.status}", True, (200, 200, 200))
            self.screen.blit(label, (10, 10))

            pygame.display.flip()

        pygame.quit()


def main():
    """Run the actor demo"""
    app = ActorDemoApp()
    app.run()


if __name__ == "__main__":
    main()
