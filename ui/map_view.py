import dearpygui.dearpygui as dpg

from worldmap.cell import TERRAIN_COLORS, CellType
from worldmap.settings import CELL_SIZE


def grid_to_pixel(x, y, size=CELL_SIZE):
    """Top-left world-pixel corner of tile ``(x, y)``."""
    return x * size, y * size


def pixel_to_grid(grid, pos, camera):
    """Screen position to tile coordinate, or None when it falls off the grid."""
    wx, wy = camera.reverse(pos)
    return grid.screen_to_grid(wx, wy)


def tile_corners(x, y, size=CELL_SIZE):
    px, py = grid_to_pixel(x, y, size)
    return (px, py), (px + size, py + size)


class Camera:
    """Simple camera handling panning and zoom."""

    def __init__(self, width, height, world_size=(0, 0)):
        # Centre the world in the viewport
        self.offset_x = (width - world_size[0]) // 2
        self.offset_y = (height - world_size[1]) // 2
        self.zoom = 1.0

    def apply(self, pos):
        x, y = pos
        return (
            x * self.zoom + self.offset_x,
            y * self.zoom + self.offset_y,
        )

    def reverse(self, pos):
        x, y = pos
        return (
            (x - self.offset_x) / self.zoom,
            (y - self.offset_y) / self.zoom,
        )

    def pan(self, dx, dy):
        self.offset_x += dx
        self.offset_y += dy

    def change_zoom(self, delta, pivot):
        old = self.zoom
        self.zoom = max(0.2, min(4.0, self.zoom + delta))
        scale = self.zoom / old
        px, py = pivot
        self.offset_x = px - scale * (px - self.offset_x)
        self.offset_y = py - scale * (py - self.offset_y)


def visible_range(grid, camera, size):
    """Inclusive-exclusive tile bounds ``(x0, y0, x1, y1)`` covered by the viewport."""
    left, top = camera.reverse((0, 0))
    right, bottom = camera.reverse(size)
    cs = grid.cell_size
    x0 = min(grid.cols, max(0, int(left // cs)))
    y0 = min(grid.rows, max(0, int(top // cs)))
    x1 = min(grid.cols, int(right // cs) + 1)
    y1 = min(grid.rows, int(bottom // cs) + 1)
    return x0, y0, x1, y1


class MapView:
    """Read-only viewer for a generated grid. Enter returns the selected tile."""

    def __init__(self, grid, size=(1024, 640), *, title="World Map"):
        self.grid = grid
        self.size = size
        world_size = (grid.cols * grid.cell_size, grid.rows * grid.cell_size)
        self.camera = Camera(*size, world_size=world_size)
        self.selected = None
        self.result = None
        self.layers = ["terrain", "walkability"]
        self.layer_index = 0

        dpg.create_context()
        dpg.create_viewport(title=title, width=size[0], height=size[1])
        with dpg.window(tag="_map_window", width=size[0], height=size[1], no_move=True, no_resize=True, no_title_bar=True):
            self.canvas = dpg.add_drawlist(width=size[0], height=size[1], tag="_canvas")
        with dpg.window(tag="_layer_window", pos=(10, 10), width=150, height=100, no_resize=True, no_move=True, no_title_bar=True):
            dpg.add_text("Layers")
            dpg.add_button(label="Terrain (F1)", callback=self._select_layer, user_data=0)
            dpg.add_button(label="Walkability (F2)", callback=self._select_layer, user_data=1)
            self.info = dpg.add_text("")
        dpg.set_primary_window("_map_window", True)
        with dpg.handler_registry():
            dpg.add_mouse_click_handler(callback=self._on_click)
            dpg.add_mouse_drag_handler(button=dpg.mvMouseButton_Middle, callback=self._on_drag)
            dpg.add_mouse_wheel_handler(callback=self._on_scroll)
            dpg.add_key_press_handler(callback=self._on_key)
        dpg.setup_dearpygui()
        dpg.show_viewport()

    # event callbacks
    def _on_click(self, sender, app_data):
        if app_data == dpg.mvMouseButton_Left:
            coords = pixel_to_grid(self.grid, dpg.get_mouse_pos(), self.camera)
            if coords:
                self.selected = coords
                cell = self.grid.get_cell(*coords)
                dpg.set_value(self.info, f"{coords}: {cell.terrain.value}")

    def _on_drag(self, sender, app_data):
        dx, dy = app_data[1], app_data[2]
        self.camera.pan(dx, dy)

    def _on_scroll(self, sender, app_data):
        pos = dpg.get_mouse_pos()
        self.camera.change_zoom(app_data * 0.1, pos)

    def _on_key(self, sender, app_data):
        if app_data == dpg.mvKey_Return and self.selected:
            self.result = self.selected
            dpg.stop_dearpygui()
        elif app_data == dpg.mvKey_Escape:
            dpg.stop_dearpygui()
        elif app_data == dpg.mvKey_Tab:
            self.layer_index = (self.layer_index + 1) % len(self.layers)
        elif app_data == dpg.mvKey_F1:
            self.layer_index = 0
        elif app_data == dpg.mvKey_F2:
            self.layer_index = 1

    def _select_layer(self, sender, app_data, user_data):
        """Callback from layer buttons to change the active layer."""
        self.layer_index = int(user_data)

    def draw_tile(self, x, y, color, width=0):
        top_left, bottom_right = tile_corners(x, y, self.grid.cell_size)
        top_left = self.camera.apply(top_left)
        bottom_right = self.camera.apply(bottom_right)
        outline = (0, 0, 0, 255) if width else color
        dpg.draw_rectangle(top_left, bottom_right, color=outline, fill=color, thickness=width or 1, parent=self.canvas)

    def draw_map(self):
        dpg.delete_item(self.canvas, children_only=True)
        layer = self.layers[self.layer_index]
        x0, y0, x1, y1 = visible_range(self.grid, self.camera, self.size)
        for y in range(y0, y1):
            for x in range(x0, x1):
                cell = self.grid.get_cell(x, y)
                if layer == "terrain":
                    color = terrain_color(cell.terrain)
                else:
                    color = walkability_color(cell.type)
                self.draw_tile(x, y, color)
        if self.selected:
            self.draw_tile(*self.selected, (255, 255, 0, 255), 2)

    def run(self):
        while dpg.is_dearpygui_running():
            self.draw_map()
            dpg.render_dearpygui_frame()
        dpg.destroy_context()
        return self.result


def terrain_color(terrain):
    return TERRAIN_COLORS.get(terrain, (200, 200, 200, 255))


def grayscale_color(value: float) -> tuple[int, int, int, int]:
    level = int(max(0.0, min(1.0, value)) * 255)
    return (level, level, level, 255)


_WALKABILITY_LEVELS = {
    CellType.EMPTY: 0.15,
    CellType.WALKABLE: 0.9,
    CellType.IMPASSABLE: 0.45,
}


def walkability_color(cell_type):
    return grayscale_color(_WALKABILITY_LEVELS.get(cell_type, 0.0))


if __name__ == "__main__":
    from worldmap import generate_world

    grid, _ = generate_world()
    view = MapView(grid)
    choice = view.run()
    if choice:
        print("Selected tile:", choice)
