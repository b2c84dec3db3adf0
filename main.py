import sys
import time

# pyglet imports
import pyglet
image = pyglet.image
from pyglet.window import key
import pyglet.gl as gl
from pyglet.math import Mat4, Vec3

# local module imports
import config
import logutil
import shaders
from atlas import AtlasConfig, make_debug_atlas
from camera import FlyCamera
from slicing import SliceController, SCROLL_LINES
from terrain import Terrain


def load_atlas_texture(path, texture_count):
    """ Load the atlas image at `path`, or build a debug atlas when the file
    does not exist.

    """
    try:
        atlas_image = image.load(path)
        logutil.log("MAIN", f"loaded atlas {path} ({atlas_image.width}x{atlas_image.height})")
    except FileNotFoundError:
        logutil.log("MAIN", f"atlas {path} not found, using debug atlas", level="WARN")
        pixels = make_debug_atlas(texture_count)
        h, w = pixels.shape[:2]
        # ImageData rows run bottom to top.
        atlas_image = image.ImageData(w, h, 'RGBA', pixels[::-1].tobytes(), pitch=w * 4)
    texture = atlas_image.get_texture()
    gl.glBindTexture(texture.target, texture.id)
    gl.glTexParameteri(texture.target, gl.GL_TEXTURE_MIN_FILTER, gl.GL_NEAREST)
    gl.glTexParameteri(texture.target, gl.GL_TEXTURE_MAG_FILTER, gl.GL_NEAREST)
    return texture


class Window(pyglet.window.Window):

    def __init__(self, *args, atlas_path=None, **kwargs):
        super(Window, self).__init__(*args, **kwargs)

        self.frame_id = 0
        self._last_frame_time = time.perf_counter()

        gl.glClearColor(*config.CLEAR_COLOR)

        # Whether or not the window exclusively captures the mouse.
        self.exclusive = False
        # (forward, strafe): +1/-1 while W/S and D/A are held.
        self.strafe = [0, 0]
        self.fast = False
        self.camera = FlyCamera.looking_at(config.CAMERA_START_POSITION, config.CAMERA_START_TARGET)

        self.slices = SliceController(AtlasConfig.from_config())

        self.terrain = Terrain().generate()
        mesh = self.terrain.build_mesh()

        # Shader program used for terrain rendering.
        self.program = shaders.create_terrain_shader()
        self.program['u_texture'] = 0
        self.program['u_model'] = Mat4()
        shaders.set_atlas_uniforms(self.program, self.slices.atlas_config)

        texture = load_atlas_texture(atlas_path or config.ATLAS_TEXTURE_PATH,
                                     self.slices.atlas_config.texture_count)
        self.batch = pyglet.graphics.Batch()
        shader_group = pyglet.graphics.ShaderGroup(self.program)
        self.group = pyglet.graphics.TextureGroup(texture, parent=shader_group)
        self.vertex_list = self.program.vertex_list_indexed(
            len(mesh.positions),
            gl.GL_TRIANGLES,
            mesh.indices.tolist(),
            batch=self.batch,
            group=self.group,
            **shaders.vertex_attributes(mesh)
        )
        logutil.log("MAIN", f"uploaded {len(mesh.indices) // 6} faces, slice={self.slices.slice_y}")

        # This call schedules the `update()` method to be called
        # TICKS_PER_SEC times per second.
        pyglet.clock.schedule_interval(self.update, 1.0 / config.TICKS_PER_SEC)
        self.on_resize(self.width, self.height)

    def set_exclusive_mouse(self, exclusive):
        """ If `exclusive` is True, the window captures the mouse and the
        camera follows mouse motion and WASD; if False both are ignored.

        """
        super(Window, self).set_exclusive_mouse(exclusive)
        self.exclusive = exclusive

    def update(self, dt):
        """ Scheduled TICKS_PER_SEC times per second; moves the camera. """
        if not self.exclusive:
            return
        self.camera.move(dt, self.strafe[0], self.strafe[1], self.fast)

    def on_mouse_motion(self, x, y, dx, dy):
        """ Called when the mouse moves; rotates the camera while captured. """
        if self.exclusive:
            self.camera.look(dx, dy, min(self.width, self.height))

    def on_key_press(self, symbol, modifiers):
        """ Called when a key is pressed. Escape toggles mouse capture. """
        if symbol == key.W:
            self.strafe[0] += 1
        elif symbol == key.S:
            self.strafe[0] -= 1
        elif symbol == key.D:
            self.strafe[1] += 1
        elif symbol == key.A:
            self.strafe[1] -= 1
        elif symbol == key.LSHIFT:
            self.fast = True
        elif symbol == key.ESCAPE:
            self.set_exclusive_mouse(not self.exclusive)

    def on_key_release(self, symbol, modifiers):
        if symbol == key.W:
            self.strafe[0] -= 1
        elif symbol == key.S:
            self.strafe[0] += 1
        elif symbol == key.D:
            self.strafe[1] -= 1
        elif symbol == key.A:
            self.strafe[1] += 1
        elif symbol == key.LSHIFT:
            self.fast = False

    def on_mouse_scroll(self, x, y, scroll_x, scroll_y):
        atlas_config = self.slices.scroll(scroll_y, SCROLL_LINES)
        shaders.set_atlas_uniforms(self.program, atlas_config)

    def on_resize(self, width, height):
        """ Called when the window is resized to a new `width` and `height`.

        """
        if getattr(self, 'program', None) is None:
            # Fired by the base constructor before the shader exists.
            return
        width, height = self.get_framebuffer_size()
        gl.glViewport(0, 0, max(1, width), max(1, height))
        aspect = width / float(max(1, height))
        self.program['u_projection'] = Mat4.perspective_projection(
            aspect, 0.1, 500.0, getattr(config, 'FOV', 65.0))
        return pyglet.event.EVENT_HANDLED

    def on_draw(self):
        """ Called by pyglet to draw the canvas.

        """
        frame_start = time.perf_counter()
        dt = frame_start - self._last_frame_time
        self._last_frame_time = frame_start
        self.frame_id += 1
        logutil.set_frame(self.frame_id)
        logutil.log("FRAME", f"start dt_ms={dt*1000.0:.2f}")

        self.clear()
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glEnable(gl.GL_CULL_FACE)
        self.program['u_view'] = Mat4.look_at(Vec3(*self.camera.position), Vec3(*self.camera.target()), Vec3(0, 1, 0))
        self.batch.draw()
        gl.glDisable(gl.GL_CULL_FACE)
        gl.glDisable(gl.GL_DEPTH_TEST)


def main():
    atlas_path = sys.argv[1] if len(sys.argv) > 1 else None
    window = Window(width=config.WINDOW_WIDTH, height=config.WINDOW_HEIGHT,
                    caption='Terrain slices', resizable=True, atlas_path=atlas_path)
    window.set_exclusive_mouse(True)
    logutil.log("MAIN", "scroll to move the highlighted slice, WASD and mouse to fly, Escape to release the mouse")
    pyglet.app.run()


if __name__ == '__main__':
    main()
