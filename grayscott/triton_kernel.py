"""Per-cell Gray-Scott step as a Triton GPU kernel.

One program instance handles BLOCK_SIZE consecutive cells of the flattened
grid. Buffers keep the host layout: (H, W, 2) float32 with (a, b) interleaved.
Neighbour indices wrap modulo W and H, so there is no masked border.
"""
import torch
import triton
import triton.language as tl

from .errors import BackendUnavailableError
from .params import resolve_feed_rate


@triton.jit
def _laplacian(ptr, row_up, row, row_down, x_left, x, x_right, mask):
    up = tl.load(ptr + (row_up + x) * 2, mask=mask, other=0)
    down = tl.load(ptr + (row_down + x) * 2, mask=mask, other=0)
    left = tl.load(ptr + (row + x_left) * 2, mask=mask, other=0)
    right = tl.load(ptr + (row + x_right) * 2, mask=mask, other=0)
    up_left = tl.load(ptr + (row_up + x_left) * 2, mask=mask, other=0)
    up_right = tl.load(ptr + (row_up + x_right) * 2, mask=mask, other=0)
    down_left = tl.load(ptr + (row_down + x_left) * 2, mask=mask, other=0)
    down_right = tl.load(ptr + (row_down + x_right) * 2, mask=mask, other=0)
    center = tl.load(ptr + (row + x) * 2, mask=mask, other=0)

    edges = up + down + left + right
    corners = up_left + up_right + down_left + down_right
    return edges * 0.2 + corners * 0.05 - center


@triton.jit
def gray_scott_step_kernel(
    cur_ptr, next_ptr,
    width, height, width_f,
    d_a, d_b, feed_rate, kill_min, kill_span,
    BLOCK_SIZE: tl.constexpr,
):
    pid = tl.program_id(axis=0)
    offsets = pid * BLOCK_SIZE + tl.arange(0, BLOCK_SIZE)
    mask = offsets < width * height

    x = offsets % width
    y = offsets // width
    x_left = (x + width - 1) % width
    x_right = (x + 1) % width
    row = y * width
    row_up = ((y + height - 1) % height) * width
    row_down = ((y + 1) % height) * width

    lap_a = _laplacian(cur_ptr, row_up, row, row_down, x_left, x, x_right, mask)
    lap_b = _laplacian(cur_ptr + 1, row_up, row, row_down, x_left, x, x_right, mask)

    a = tl.load(cur_ptr + offsets * 2, mask=mask, other=0)
    b = tl.load(cur_ptr + offsets * 2 + 1, mask=mask, other=0)
    kill_rate = kill_min + (x.to(tl.float32) / width_f) * kill_span

    reaction = a * b * b
    next_a = a + (d_a * lap_a - reaction + feed_rate * (1 - a))
    next_b = b + (d_b * lap_b + reaction - (feed_rate + kill_rate) * b)

    # Clip values between 0 and 1
    next_a = tl.minimum(tl.maximum(next_a, 0.0), 1.0)
    next_b = tl.minimum(tl.maximum(next_b, 0.0), 1.0)

    tl.store(next_ptr + offsets * 2, next_a, mask=mask)
    tl.store(next_ptr + offsets * 2 + 1, next_b, mask=mask)


class TritonKernel:
    name = "triton"

    def __init__(self, device="cuda", block_size=1024):
        if not torch.cuda.is_available():
            raise BackendUnavailableError("triton backend needs a CUDA device")
        self.device = torch.device(device)
        self.block_size = block_size

    def __call__(self, current, out, params):
        height, width = current.shape[:2]
        cur = torch.as_tensor(current, dtype=torch.float32, device=self.device).contiguous()
        nxt = torch.empty_like(cur)
        grid = (triton.cdiv(width * height, self.block_size),)
        gray_scott_step_kernel[grid](
            cur, nxt,
            width, height, float(width),
            params.d_a, params.d_b, resolve_feed_rate(params),
            params.kill_min, params.kill_max - params.kill_min,
            BLOCK_SIZE=self.block_size,
        )
        out[...] = nxt.cpu().numpy()
